"""Shared dependencies for API routes."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from db.base import get_db
from services import adzuna_client, huggingface_client, scoring_client
from services.user_service import UserService


def get_hf_client() -> huggingface_client.HuggingFaceClient:
    return huggingface_client.get_client()


def get_adzuna_client() -> adzuna_client.AdzunaClient:
    return adzuna_client.get_client()


def get_scoring_client() -> scoring_client.ScoringClient:
    return scoring_client.get_client()


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)
