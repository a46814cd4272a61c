from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from fastapi import Depends, HTTPException, status
from config import config
import logging

logger = logging.getLogger(__name__)

# Instantiate the HTTP Bearer scheme
bearer_scheme = HTTPBearer()

def get_current_client(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)):
    """Validates the Bearer token against VALID_TOKENS for every secured endpoint."""
    if credentials.scheme.lower() != "bearer" or credentials.credentials not in config.valid_tokens:
        logger.info("rejected request with invalid bearer token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing Bearer token.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    # Returns the token value, which can be used to identify the client if needed
    return credentials.credentials
