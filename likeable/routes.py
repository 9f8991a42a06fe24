from fastapi import APIRouter

from likeable.controllers.like_controller import router as like_router


router = APIRouter(
    responses={
            400: {"description": "Bad request"},
            500: {"description": "Internal server error"},
    }
)

router.include_router(like_router, prefix="/likes", tags=["Likes"])
