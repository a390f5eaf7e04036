from fastapi import APIRouter, Depends, Request

from toolhub.models.preferences import UserPreferences, UserPreferencesUpdate
from toolhub.services.preferences import PreferenceStore

router = APIRouter(prefix="/api/preferences", tags=["preferences"])


def get_preference_store(request: Request) -> PreferenceStore:
    return request.app.state.preference_store


@router.get(
    "/{user_id}",
    response_model=UserPreferences,
    summary="Get preferences (defaults are created on first access)",
)
async def get_preferences(
    user_id: int, store: PreferenceStore = Depends(get_preference_store)
):
    return store.get_or_create(user_id)


@router.put("/{user_id}", response_model=UserPreferences, summary="Update preferences")
async def update_preferences(
    user_id: int,
    payload: UserPreferencesUpdate,
    store: PreferenceStore = Depends(get_preference_store),
):
    return store.update(user_id, payload)
