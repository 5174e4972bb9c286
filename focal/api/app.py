"""FastAPI web application for Focal."""

import logging
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Response, status

from focal.api.dependencies import (
    get_calendar,
    get_completion_repository,
    get_template_or_404,
    get_template_repository,
)
from focal.api.task_models import (
    DayPlanResponse,
    MoveTaskRequest,
    NextOccurrenceResponse,
    OccurrenceListResponse,
    RRuleResponse,
    SubtaskRequest,
    TaskListResponse,
    TaskResponse,
    TaskTemplateRequest,
    WeekPlanResponse,
)
from focal.database.completion_record_repository import CompletionRecordRepository
from focal.database.database import init_db
from focal.database.task_template_repository import TaskTemplateRepository
from focal.engine.planner import completion_progress, instances_for_date, instances_for_week, start_of_week
from focal.models.constants import MAX_OCCURRENCE_RANGE_DAYS
from focal.models.occurrence import Occurrence
from focal.models.recurrence import SUNDAY
from focal.models.subtask import Subtask
from focal.models.task import TaskTemplate
from focal.models.task_factory import create_task_template
from focal.recurrence.calendar import CalendarContext
from focal.recurrence.materialize import (
    generate_occurrence_for_date,
    generate_occurrences,
    next_occurrence,
)
from focal.recurrence.rrule_export import rule_to_rrule

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


# Initialize FastAPI app
app = FastAPI(
    title="Focal API",
    description="Daily planner with recurring tasks and per-occurrence completion",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


# Task templates

@app.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    request: TaskTemplateRequest,
    templates: TaskTemplateRepository = Depends(get_template_repository),
):
    """Create a task template (recurring or one-off)."""
    template = create_task_template(
        title=request.title,
        anchor_start=request.anchor_start,
        duration=request.duration,
        recurrence=request.resolve_recurrence(),
        icon=request.icon,
        color_name=request.color_name,
        energy_level=request.energy_level,
        notes=request.notes,
        subtasks=[Subtask(title=title) for title in request.subtasks],
    )
    created = templates.create(template)
    logger.info(f"Created task {created.id} ({created.recurrence.label})")
    return TaskResponse.from_template(created)


@app.get("/tasks", response_model=TaskListResponse)
def list_tasks(templates: TaskTemplateRepository = Depends(get_template_repository)):
    """List all task templates (newest first)."""
    return TaskListResponse(tasks=[TaskResponse.from_template(t) for t in templates.get_all()])


@app.get("/tasks/{template_id}", response_model=TaskResponse)
def get_task(template: TaskTemplate = Depends(get_template_or_404)):
    return TaskResponse.from_template(template)


@app.put("/tasks/{template_id}", response_model=TaskResponse)
def replace_task(
    request: TaskTemplateRequest,
    template: TaskTemplate = Depends(get_template_or_404),
    templates: TaskTemplateRepository = Depends(get_template_repository),
):
    """Replace a template's definition; id, creation time and completion state are kept."""
    updated = template.model_copy(
        update={
            "title": request.title,
            "anchor_start": request.anchor_start,
            "duration": request.duration,
            "recurrence": request.resolve_recurrence(),
            "icon": request.icon if request.icon is not None else template.icon,
            "color_name": request.color_name if request.color_name is not None else template.color_name,
            "energy_level": request.energy_level if request.energy_level is not None else template.energy_level,
            "notes": request.notes,
        }
    )
    saved = templates.update(updated)
    if saved is None:
        raise HTTPException(status_code=404, detail=f"Task {template.id} not found")
    return TaskResponse.from_template(saved)


@app.delete("/tasks/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    template: TaskTemplate = Depends(get_template_or_404),
    templates: TaskTemplateRepository = Depends(get_template_repository),
):
    """Delete a template and all of its completion records."""
    templates.delete(template.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/tasks/{template_id}/toggle-completion", response_model=TaskResponse)
def toggle_task_completion(
    template: TaskTemplate = Depends(get_template_or_404),
    templates: TaskTemplateRepository = Depends(get_template_repository),
):
    """Toggle completion of a one-off task. Recurring tasks complete per occurrence."""
    if template.is_recurring:
        raise HTTPException(
            status_code=400,
            detail="Recurring tasks are completed per occurrence: use /tasks/{id}/occurrences/{day}/toggle-completion",
        )
    return TaskResponse.from_template(templates.toggle_completion(template.id))


@app.post("/tasks/{template_id}/move", response_model=TaskResponse)
def move_task(
    request: MoveTaskRequest,
    template: TaskTemplate = Depends(get_template_or_404),
    templates: TaskTemplateRepository = Depends(get_template_repository),
):
    """Move the anchor to another day, keeping its time of day unless hour/minute are given."""
    moved = templates.move_to_date(template.id, request.day, hour=request.hour, minute=request.minute)
    if moved is None:
        raise HTTPException(status_code=404, detail=f"Task {template.id} not found")
    logger.info(f"Moved task {template.id} to {moved.anchor_start.isoformat()}")
    return TaskResponse.from_template(moved)


# Subtasks

@app.post("/tasks/{template_id}/subtasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def add_subtask(
    request: SubtaskRequest,
    template: TaskTemplate = Depends(get_template_or_404),
    templates: TaskTemplateRepository = Depends(get_template_repository),
):
    updated = templates.add_subtask(template.id, request.title)
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Task {template.id} not found")
    return TaskResponse.from_template(updated)


@app.post("/tasks/{template_id}/subtasks/{subtask_id}/toggle", response_model=TaskResponse)
def toggle_subtask(
    subtask_id: str,
    template: TaskTemplate = Depends(get_template_or_404),
    templates: TaskTemplateRepository = Depends(get_template_repository),
):
    """Check or uncheck a subtask. Subtasks belong to the template, not to one occurrence."""
    updated = templates.toggle_subtask(template.id, subtask_id)
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Subtask {subtask_id} not found")
    return TaskResponse.from_template(updated)


@app.delete("/tasks/{template_id}/subtasks/{subtask_id}", response_model=TaskResponse)
def remove_subtask(
    subtask_id: str,
    template: TaskTemplate = Depends(get_template_or_404),
    templates: TaskTemplateRepository = Depends(get_template_repository),
):
    updated = templates.remove_subtask(template.id, subtask_id)
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Subtask {subtask_id} not found")
    return TaskResponse.from_template(updated)


@app.get("/tasks/{template_id}/rrule", response_model=RRuleResponse)
def export_rrule(
    template: TaskTemplate = Depends(get_template_or_404),
    calendar: CalendarContext = Depends(get_calendar),
):
    """Export the template's recurrence as an iCalendar RRULE."""
    try:
        rrule = rule_to_rrule(template.recurrence, calendar.local_day(template.anchor_start))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return RRuleResponse(template_id=template.id, rrule=rrule)


# Occurrences

@app.get("/tasks/{template_id}/occurrences", response_model=OccurrenceListResponse)
def list_occurrences(
    start: date,
    end: date,
    template: TaskTemplate = Depends(get_template_or_404),
    calendar: CalendarContext = Depends(get_calendar),
    completions: CompletionRecordRepository = Depends(get_completion_repository),
):
    """Materialize the template's occurrences from start through end (inclusive)."""
    if end < start:
        raise HTTPException(status_code=400, detail="end must be on or after start")
    if (end - start).days + 1 > MAX_OCCURRENCE_RANGE_DAYS:
        raise HTTPException(
            status_code=400, detail=f"range may span at most {MAX_OCCURRENCE_RANGE_DAYS} days"
        )

    records = completions.list_in_range(start, end, [template.id])
    occurrences = generate_occurrences(template, start, end, records, calendar)
    return OccurrenceListResponse(
        template_id=template.id,
        start=start,
        end=end,
        count=len(occurrences),
        occurrences=occurrences,
    )


@app.get("/tasks/{template_id}/occurrences/{day}", response_model=Occurrence)
def get_occurrence(
    day: date,
    template: TaskTemplate = Depends(get_template_or_404),
    calendar: CalendarContext = Depends(get_calendar),
    completions: CompletionRecordRepository = Depends(get_completion_repository),
):
    occurrence = generate_occurrence_for_date(template, day, completions, calendar)
    if occurrence is None:
        raise HTTPException(status_code=404, detail=f"Task {template.id} does not occur on {day.isoformat()}")
    return occurrence


@app.post("/tasks/{template_id}/occurrences/{day}/toggle-completion", response_model=Occurrence)
def toggle_occurrence_completion(
    day: date,
    template: TaskTemplate = Depends(get_template_or_404),
    calendar: CalendarContext = Depends(get_calendar),
    completions: CompletionRecordRepository = Depends(get_completion_repository),
):
    """Create or remove the completion record of one occurrence."""
    if generate_occurrence_for_date(template, day, None, calendar) is None:
        raise HTTPException(status_code=400, detail=f"Task {template.id} does not occur on {day.isoformat()}")

    completed = completions.toggle(template.id, day)
    logger.info(f"Occurrence {template.id}@{day.isoformat()} completed={completed}")
    return generate_occurrence_for_date(template, day, completions, calendar)


@app.get("/tasks/{template_id}/next-occurrence", response_model=NextOccurrenceResponse)
def get_next_occurrence(
    after: Optional[date] = Query(None, description="Defaults to today in the calendar's zone"),
    template: TaskTemplate = Depends(get_template_or_404),
    calendar: CalendarContext = Depends(get_calendar),
):
    """First occurrence strictly after ``after`` within the search horizon."""
    after_day = after or datetime.now(calendar.time_zone).date()
    return NextOccurrenceResponse(
        template_id=template.id,
        after=after_day,
        next_occurrence=next_occurrence(template, after_day, calendar),
    )


# Planner

def _day_plan(day: date, templates: list, records: list, calendar: CalendarContext) -> DayPlanResponse:
    instances = instances_for_date(templates, day, records, calendar)
    return DayPlanResponse(day=day, progress=completion_progress(instances), instances=instances)


@app.get("/planner/day", response_model=DayPlanResponse)
def plan_day(
    day: date,
    calendar: CalendarContext = Depends(get_calendar),
    templates: TaskTemplateRepository = Depends(get_template_repository),
    completions: CompletionRecordRepository = Depends(get_completion_repository),
):
    """Every instance on one day, with completion progress."""
    return _day_plan(day, templates.get_all(), completions.list_in_range(day, day), calendar)


@app.get("/planner/week", response_model=WeekPlanResponse)
def plan_week(
    day: date,
    week_start: int = Query(SUNDAY, ge=0, le=6, description="First weekday, 0=Sunday"),
    calendar: CalendarContext = Depends(get_calendar),
    templates: TaskTemplateRepository = Depends(get_template_repository),
    completions: CompletionRecordRepository = Depends(get_completion_repository),
):
    """Seven planner days for the week containing ``day``."""
    first = start_of_week(day, calendar, week_start)
    last = calendar.add_days(first, 6)
    all_templates = templates.get_all()
    records = completions.list_in_range(first, last)

    week = instances_for_week(all_templates, first, records, calendar, week_start)
    days = [
        DayPlanResponse(day=calendar.add_days(first, offset), progress=completion_progress(instances), instances=instances)
        for offset, instances in enumerate(week)
    ]
    week_instances = [i for instances in week for i in instances]
    return WeekPlanResponse(week_start=first, progress=completion_progress(week_instances), days=days)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
