"""Request dependencies shared by the routers."""

from fastapi import Request

from expirycal.services.calendar_pipeline import CalendarPipeline


def get_pipeline(request: Request) -> CalendarPipeline:
    """Dependency returning the application's calendar pipeline.

    Args:
        request (Request): The incoming request.

    Returns:
        CalendarPipeline: The pipeline created at startup.
    """
    return request.app.state.pipeline
