"""
API dependencies for dependency injection
"""

from fastapi import Request

from services.meals_view_model import MealsViewModel


def get_view_model(request: Request) -> MealsViewModel:
    """
    View-model dependency for FastAPI routes.

    The instance is created by the application lifespan and lives on
    ``app.state``.

    Usage:
        @router.get("/example")
        async def example(view_model: MealsViewModel = Depends(get_view_model)):
            return view_model.state
    """
    return request.app.state.view_model
