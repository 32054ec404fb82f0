from fastapi import APIRouter, Depends
from irlly.database.supabase_client import get_supabase
from irlly.modules.feed.schemas import FeedItem
from irlly.modules.feed.service import FeedAssembler
from irlly.core.access import AccessEvaluator
from irlly.core.dependencies import get_current_user_id, get_access_evaluator
from supabase import Client
from typing import List

router = APIRouter(prefix="/feed", tags=["feed"])


def get_feed_assembler(
    supabase: Client = Depends(get_supabase),
    evaluator: AccessEvaluator = Depends(get_access_evaluator)
) -> FeedAssembler:
    return FeedAssembler(supabase, evaluator)


@router.get("", response_model=List[FeedItem])
async def get_feed(
    user_id: str = Depends(get_current_user_id),
    assembler: FeedAssembler = Depends(get_feed_assembler)
):
    """Live pins then upcoming meetups shared with the signed-in user"""
    return assembler.build_feed(user_id)
