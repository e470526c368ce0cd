"""Form service: trip questionnaires, submissions and answer summaries."""

import logging
import uuid
from collections import Counter

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import READ_ROLES
from app.models.form import Form, FormQuestion, FormResponse
from app.schemas.form import FormCreate
from app.services.trip_access import check_trip_access
from app.utils import as_utc, utcnow

logger = logging.getLogger(__name__)

NUMERIC_TYPES = {"rating"}
CHOICE_TYPES = {"single_choice", "multiple_choice", "yes_no"}


def _is_blank(value) -> bool:
    return value is None or value == "" or value == []


class FormService:
    async def can_view(self, db: AsyncSession, form: Form, user_id: uuid.UUID | None) -> bool:
        if form.visibility == "public" and form.status == "published":
            return True
        if form.trip_id is None:
            return user_id is not None and form.created_by == user_id
        access = await check_trip_access(db, form.trip_id, user_id, READ_ROLES)
        return access.allowed

    async def get_template(self, db: AsyncSession, template_id: uuid.UUID, user_id: uuid.UUID) -> Form:
        """A form usable as a template: flagged as one and visible to the caller."""
        template = await db.scalar(select(Form).where(Form.id == template_id, Form.is_template.is_(True)))
        if template is None:
            raise LookupError("Template not found")
        if not await self.can_view(db, template, user_id):
            raise PermissionError("You do not have access to this template")
        return template

    async def get_form(self, db: AsyncSession, form_id: uuid.UUID) -> Form:
        result = await db.execute(select(Form).where(Form.id == form_id))
        form = result.scalar_one_or_none()
        if form is None:
            raise LookupError("Form not found")
        return form

    async def get_trip_form(self, db: AsyncSession, trip_id: uuid.UUID, form_id: uuid.UUID) -> Form:
        form = await self.get_form(db, form_id)
        if form.trip_id != trip_id:
            raise LookupError("Form not found")
        return form

    async def list_trip_forms(self, db: AsyncSession, trip_id: uuid.UUID) -> list[Form]:
        result = await db.execute(
            select(Form).where(Form.trip_id == trip_id).order_by(Form.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_form(
        self, db: AsyncSession, trip_id: uuid.UUID, user_id: uuid.UUID, data: FormCreate
    ) -> Form:
        """Create a form; a template's questions are copied ahead of any new ones."""
        questions = []
        if data.template_id is not None:
            template = await self.get_template(db, data.template_id, user_id)
            for q in template.questions:
                questions.append(FormQuestion(
                    label=q.label,
                    description=q.description,
                    question_type=q.question_type,
                    required=q.required,
                    options=q.options,
                ))
        for q in data.questions:
            questions.append(FormQuestion(**q.model_dump()))
        for position, question in enumerate(questions):
            question.position = position

        form = Form(
            trip_id=trip_id,
            created_by=user_id,
            questions=questions,
            expires_at=as_utc(data.expires_at),
            **data.model_dump(exclude={"questions", "expires_at"}),
        )
        db.add(form)
        await db.commit()
        await db.refresh(form, ["questions"])
        logger.info(f"Form {form.id} created on trip {trip_id} with {len(questions)} questions")
        return form

    async def update_form(self, db: AsyncSession, form: Form, changes: dict) -> Form:
        if "expires_at" in changes:
            changes["expires_at"] = as_utc(changes["expires_at"])
        for field, value in changes.items():
            setattr(form, field, value)
        await db.commit()
        await db.refresh(form, ["questions"])
        return form

    async def delete_form(self, db: AsyncSession, form: Form):
        await db.delete(form)
        await db.commit()

    def validate_answers(self, form: Form, answers: dict) -> dict:
        """Keep answers to known questions and enforce required ones."""
        by_id = {str(q.id): q for q in form.questions}
        unknown = set(answers) - set(by_id)
        if unknown:
            raise ValueError("Answers reference unknown questions")

        missing = [q.label for q in form.questions if q.required and _is_blank(answers.get(str(q.id)))]
        if missing:
            raise ValueError(f"Missing required answers: {', '.join(missing)}")

        for key, value in answers.items():
            question = by_id[key]
            if question.question_type in NUMERIC_TYPES and not _is_blank(value):
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ValueError(f"'{question.label}' needs a numeric rating")
        return {k: v for k, v in answers.items() if not _is_blank(v)}

    async def submit(
        self, db: AsyncSession, form: Form, respondent_id: uuid.UUID | None, answers: dict
    ) -> FormResponse:
        if form.status != "published":
            raise ValueError("This form is not accepting responses")
        if form.expires_at is not None and as_utc(form.expires_at) <= utcnow():
            raise ValueError("This form has expired")

        response = FormResponse(
            form_id=form.id,
            respondent_id=respondent_id,
            answers=self.validate_answers(form, answers),
        )
        db.add(response)
        await db.commit()
        await db.refresh(response)
        return response

    async def summary(self, db: AsyncSession, form: Form) -> dict:
        result = await db.execute(select(FormResponse).where(FormResponse.form_id == form.id))
        responses = list(result.scalars().all())

        questions = []
        for q in form.questions:
            values = [r.answers.get(str(q.id)) for r in responses if str(q.id) in r.answers]
            entry = {
                "question_id": q.id,
                "label": q.label,
                "question_type": q.question_type,
                "answer_count": len(values),
            }
            if q.question_type in NUMERIC_TYPES:
                numbers = [v for v in values if isinstance(v, (int, float)) and not isinstance(v, bool)]
                entry["average"] = round(sum(numbers) / len(numbers), 2) if numbers else None
            if q.question_type in CHOICE_TYPES:
                counter = Counter()
                for v in values:
                    for choice in (v if isinstance(v, list) else [v]):
                        counter[str(choice)] += 1
                entry["counts"] = dict(counter)
            questions.append(entry)

        return {"form_id": form.id, "response_count": len(responses), "questions": questions}


form_service = FormService()
