"""FastAPI application factory."""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager, suppress
from datetime import date, datetime

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from byte_buddy.api.models import (
    CredentialsRequest,
    FoodFormRequest,
    FoodResponse,
    GoalsRequest,
    MealEntryRequest,
    MealEntryResponse,
    ProfileResponse,
    ReminderRequest,
    ReminderResponse,
    TotalsResponse,
)
from byte_buddy.app_logging import configure_logging
from byte_buddy.containers import AppContainer
from byte_buddy.domain.errors import ValidationError
from byte_buddy.domain.foods import Food, FoodDraft, MealSlot
from byte_buddy.domain.goals import ReminderSettings
from byte_buddy.domain.lookup import LookupFood
from byte_buddy.services.aggregation import calorie_progress, calories_remaining
from byte_buddy.services.validation import (
    parse_food_form,
    parse_goals_form,
    parse_quantity,
)

NOTIFICATION_TICK_SECONDS = 1.0


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        tasks = [
            asyncio.create_task(
                _poll(
                    state_container.refresh_feeds,
                    state_container.settings.feed_poll_interval_seconds,
                )
            ),
            asyncio.create_task(
                _poll(
                    state_container.run_pending_notifications,
                    NOTIFICATION_TICK_SECONDS,
                )
            ),
        ]
        yield
        for task in tasks:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        _request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/auth/sign-in")
    async def sign_in(body: CredentialsRequest, request: Request) -> dict[str, str]:
        """Sign in with email and password."""
        auth_service = _container(request).auth_service
        user_id = auth_service.sign_in(body.email, body.password)
        if user_id is None:
            raise HTTPException(
                status.HTTP_401_UNAUTHORIZED, detail=auth_service.error_message
            )
        return {"user_id": user_id}

    @app.post("/auth/sign-up", status_code=status.HTTP_201_CREATED)
    async def sign_up(body: CredentialsRequest, request: Request) -> dict[str, str]:
        """Create an account."""
        auth_service = _container(request).auth_service
        user_id = auth_service.sign_up(
            body.email, body.password, body.confirm_password
        )
        if user_id is None:
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST, detail=auth_service.error_message
            )
        return {"user_id": user_id}

    @app.post("/auth/sign-out")
    async def sign_out(request: Request) -> dict[str, str]:
        """End the session."""
        auth_service = _container(request).auth_service
        if not auth_service.sign_out():
            raise HTTPException(
                status.HTTP_502_BAD_GATEWAY, detail=auth_service.error_message
            )
        return {"status": "ok"}

    @app.get("/foods")
    async def list_foods(request: Request) -> list[FoodResponse]:
        """List the catalog, newest first."""
        state_container = _signed_in(request)
        foods = state_container.food_catalog.foods
        return [FoodResponse.from_food(food) for food in foods]

    @app.post("/foods", status_code=status.HTTP_201_CREATED)
    async def create_food(body: FoodFormRequest, request: Request) -> FoodResponse:
        """Validate and add a custom food."""
        state_container = _signed_in(request)
        draft = _food_draft(body, editing=False)
        catalog = state_container.food_catalog
        food = catalog.add_food(draft)
        if food is None:
            raise HTTPException(status.HTTP_502_BAD_GATEWAY, detail=catalog.error_message)
        return FoodResponse.from_food(food)

    @app.patch("/foods/{food_id}")
    async def edit_food(
        food_id: str, body: FoodFormRequest, request: Request
    ) -> FoodResponse:
        """Validate and save edits to a food."""
        state_container = _signed_in(request)
        catalog = state_container.food_catalog
        if catalog.get_food(food_id) is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Food not found")
        food = catalog.update_food(food_id, _food_draft(body, editing=True))
        if food is None:
            raise HTTPException(status.HTTP_502_BAD_GATEWAY, detail=catalog.error_message)
        return FoodResponse.from_food(food)

    @app.delete("/foods/{food_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_food(food_id: str, request: Request) -> None:
        """Delete a food; logged entries keep their snapshot."""
        catalog = _signed_in(request).food_catalog
        if not catalog.delete_food(food_id):
            raise HTTPException(status.HTTP_502_BAD_GATEWAY, detail=catalog.error_message)

    @app.get("/meals")
    async def list_meals(
        request: Request, day: date | None = None, meal_slot: MealSlot | None = None
    ) -> list[MealEntryResponse]:
        """List entries for a calendar day, optionally for one meal slot."""
        meal_log = _signed_in(request).meal_log
        target = day or _today(request)
        entries = (
            meal_log.entries_for(meal_slot, target)
            if meal_slot is not None
            else meal_log.entries_on(target)
        )
        return [MealEntryResponse.from_entry(entry) for entry in entries]

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def log_meal(body: MealEntryRequest, request: Request) -> MealEntryResponse:
        """Log a catalog food or a lookup result."""
        state_container = _signed_in(request)
        quantity = parse_quantity(body.quantity)
        food = _resolve_food(state_container, body)
        meal_log = state_container.meal_log
        entry = meal_log.add_entry(food, quantity, body.meal_slot, body.date_consumed)
        if entry is None:
            raise HTTPException(status.HTTP_502_BAD_GATEWAY, detail=meal_log.error_message)
        return MealEntryResponse.from_entry(entry)

    @app.delete("/meals/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_meal(entry_id: str, request: Request) -> None:
        """Delete a logged entry."""
        meal_log = _signed_in(request).meal_log
        if not meal_log.delete_entry(entry_id):
            raise HTTPException(status.HTTP_502_BAD_GATEWAY, detail=meal_log.error_message)

    @app.get("/totals")
    async def totals(request: Request, day: date | None = None) -> TotalsResponse:
        """Return nutrient totals and calorie progress for a day."""
        state_container = _signed_in(request)
        daily = state_container.meal_log.daily_totals(day or _today(request))
        goal = state_container.goals.profile.daily_calorie_goal
        return TotalsResponse.from_totals(
            daily,
            goal=goal,
            remaining=calories_remaining(goal, daily),
            progress=calorie_progress(goal, daily),
        )

    @app.get("/goals")
    async def get_goals(request: Request) -> ProfileResponse:
        """Return the goal profile."""
        return ProfileResponse.from_profile(_signed_in(request).goals.profile)

    @app.put("/goals")
    async def save_goals(body: GoalsRequest, request: Request) -> ProfileResponse:
        """Validate and save daily targets."""
        goals = _signed_in(request).goals
        parsed = parse_goals_form(
            body.calorie, body.protein, body.carb, body.sugar, body.fat, body.weight
        )
        if not goals.save_goals(
            parsed.calorie,
            parsed.protein,
            parsed.carb,
            parsed.sugar,
            parsed.fat,
            parsed.weight,
        ):
            raise HTTPException(status.HTTP_502_BAD_GATEWAY, detail=goals.error_message)
        return ProfileResponse.from_profile(goals.profile)

    @app.put("/goals/reminder")
    async def save_reminder(body: ReminderRequest, request: Request) -> ReminderResponse:
        """Save reminder settings and apply them to the local scheduler."""
        state_container = _signed_in(request)
        goals = state_container.goals
        if not goals.save_reminder(body.enabled, body.time, body.message):
            raise HTTPException(status.HTTP_502_BAD_GATEWAY, detail=goals.error_message)
        scheduled = state_container.reminder_scheduler.apply(
            ReminderSettings(
                enabled=body.enabled, time_of_day=body.time, message=body.message
            )
        )
        message = None
        if not scheduled:
            message = (
                "Notifications are disabled. Please enable them in Settings "
                "to receive reminders."
            )
        return ReminderResponse(saved=True, scheduled=scheduled, message=message)

    @app.get("/lookup")
    async def lookup(query: str, request: Request) -> list[LookupFood]:
        """Search the external nutrition database."""
        lookup_service = _container(request).lookup_service
        results = await lookup_service.search(query)
        if lookup_service.error_message:
            raise HTTPException(
                status.HTTP_502_BAD_GATEWAY, detail=lookup_service.error_message
            )
        return results

    @app.post("/lookup/{index}/commit", status_code=status.HTTP_201_CREATED)
    async def commit_lookup(index: int, request: Request) -> FoodResponse:
        """Save a lookup result into the catalog."""
        state_container = _signed_in(request)
        draft = _lookup_draft(state_container, index)
        catalog = state_container.food_catalog
        food = catalog.add_food(draft)
        if food is None:
            raise HTTPException(status.HTTP_502_BAD_GATEWAY, detail=catalog.error_message)
        logger.info("Lookup result %s committed as food %s", index, food.id)
        return FoodResponse.from_food(food)

    return app


async def _poll(callback: Callable[[], None], interval_seconds: float) -> None:
    logger = logging.getLogger(__name__)
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            callback()
        except Exception:
            logger.exception("Background task failed")


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _signed_in(request: Request) -> AppContainer:
    state_container = _container(request)
    if state_container.session_manager.current_user_id is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="Not signed in")
    return state_container


def _today(request: Request) -> date:
    return datetime.now(tz=_container(request).meal_log.timezone).date()


def _food_draft(body: FoodFormRequest, *, editing: bool) -> FoodDraft:
    return parse_food_form(
        body.name,
        body.calories,
        body.protein,
        body.carbs,
        body.fat,
        body.serving_size,
        editing=editing,
    )


def _lookup_draft(state_container: AppContainer, index: int) -> FoodDraft:
    results = state_container.lookup_service.results
    if not 0 <= index < len(results):
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Lookup result not found")
    return results[index].to_draft()


def _resolve_food(
    state_container: AppContainer, body: MealEntryRequest
) -> Food | FoodDraft:
    if body.food_id is not None:
        food = state_container.food_catalog.get_food(body.food_id)
        if food is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Food not found")
        return food
    if body.lookup_index is not None:
        return _lookup_draft(state_container, body.lookup_index)
    raise ValidationError("Select a food to log")
