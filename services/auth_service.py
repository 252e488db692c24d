# services/auth_service.py

import logging
from datetime import datetime, timezone
from fastapi import HTTPException
from pymongo.errors import DuplicateKeyError
import config
from database import get_user_collection
from models.auth import Credentials
from utils.errors import Unauthorized
from utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

async def register_user(credentials: Credentials):
    if not config.ALLOW_REGISTRATION:
        raise HTTPException(status_code=403, detail="Registration is disabled")

    username = credentials.username.strip()
    collection = get_user_collection()
    if await collection.find_one({"username": username}):
        raise HTTPException(status_code=400, detail="Username already exists")

    try:
        await collection.insert_one({
            "username": username,
            "password": hash_password(credentials.password),
            "createDate": datetime.now(timezone.utc),
        })
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Username already exists")

    logger.info("User registered: %s", username)
    return {"message": "User registered successfully"}

async def login(credentials: Credentials):
    username = credentials.username.strip()
    user = await get_user_collection().find_one({"username": username})
    if not user or not verify_password(credentials.password, user.get("password")):
        logger.warning("Failed login for %s", username)
        raise Unauthorized("Invalid username or password")

    logger.info("User logged in: %s", username)
    return {"token": create_access_token(username), "token_type": "bearer"}
