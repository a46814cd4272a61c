from fastapi import Depends
from auth.security import get_current_client
from data.database import get_db
from data.store import get_experiment_store

# --- DEPENDENCY INJECTION SETUP ---
CLIENT_AUTH = Depends(get_current_client)
DB_DEPENDENCY = Depends(get_db)
STORE_DEPENDENCY = Depends(get_experiment_store)
