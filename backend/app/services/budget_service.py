"""Budget service: trip expenses, spending summary and settle-up."""

import logging
import uuid
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.budget import Expense
from app.models.itinerary import ItineraryItem
from app.models.profile import Profile
from app.models.trip import Trip, TripMember
from app.schemas.budget import ExpenseCreate

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _money(value) -> float:
    return float(Decimal(str(value or 0)).quantize(CENT))


def settle_up(balances: dict[uuid.UUID, Decimal]) -> list[dict]:
    """Greedy transfers from debtors to creditors that zero every balance."""
    creditors = sorted(((b, uid) for uid, b in balances.items() if b > 0), reverse=True)
    debtors = sorted(((-b, uid) for uid, b in balances.items() if b < 0), reverse=True)
    creditors = [[amount, uid] for amount, uid in creditors]
    debtors = [[amount, uid] for amount, uid in debtors]

    transfers = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        amount = min(debtors[i][0], creditors[j][0])
        if amount >= CENT:
            transfers.append({"from_user_id": debtors[i][1], "to_user_id": creditors[j][1], "amount": _money(amount)})
        debtors[i][0] -= amount
        creditors[j][0] -= amount
        if debtors[i][0] < CENT:
            i += 1
        if creditors[j][0] < CENT:
            j += 1
    return transfers


class BudgetService:
    async def list_expenses(self, db: AsyncSession, trip_id: uuid.UUID) -> list[Expense]:
        result = await db.execute(
            select(Expense)
            .where(Expense.trip_id == trip_id)
            .order_by(Expense.date.desc(), Expense.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_expense(self, db: AsyncSession, trip_id: uuid.UUID, expense_id: uuid.UUID) -> Expense:
        result = await db.execute(
            select(Expense).where(Expense.id == expense_id, Expense.trip_id == trip_id)
        )
        expense = result.scalar_one_or_none()
        if expense is None:
            raise LookupError("Expense not found")
        return expense

    async def _check_payer(self, db: AsyncSession, trip: Trip, user_id: uuid.UUID):
        if user_id == trip.created_by:
            return
        result = await db.execute(
            select(TripMember.id).where(TripMember.trip_id == trip.id, TripMember.user_id == user_id)
        )
        if result.scalar_one_or_none() is None:
            raise ValueError("The payer must be a member of this trip")

    async def create_expense(
        self, db: AsyncSession, trip: Trip, user_id: uuid.UUID, data: ExpenseCreate
    ) -> Expense:
        paid_by = data.paid_by or user_id
        await self._check_payer(db, trip, paid_by)
        expense = Expense(
            trip_id=trip.id,
            title=data.title.strip(),
            amount=data.amount,
            currency=data.currency.upper(),
            category=data.category,
            paid_by=paid_by,
            date=data.date,
            notes=data.notes,
            created_by=user_id,
        )
        db.add(expense)
        await db.commit()
        await db.refresh(expense)
        return expense

    async def update_expense(self, db: AsyncSession, trip: Trip, expense: Expense, changes: dict) -> Expense:
        if changes.get("paid_by") is not None:
            await self._check_payer(db, trip, changes["paid_by"])
        for field, value in changes.items():
            setattr(expense, field, value)
        await db.commit()
        await db.refresh(expense)
        return expense

    async def delete_expense(self, db: AsyncSession, expense: Expense):
        await db.delete(expense)
        await db.commit()

    async def summary(self, db: AsyncSession, trip: Trip) -> dict:
        expenses = await self.list_expenses(db, trip.id)
        planned = (await db.execute(
            select(func.coalesce(func.sum(ItineraryItem.estimated_cost), 0))
            .where(ItineraryItem.trip_id == trip.id)
        )).scalar()

        members = await db.execute(
            select(Profile).join(TripMember, TripMember.user_id == Profile.id).where(TripMember.trip_id == trip.id)
        )
        people = {p.id: p for p in members.scalars().all()}

        total = Decimal("0")
        by_category: dict[str, Decimal] = {}
        paid: dict[uuid.UUID, Decimal] = {uid: Decimal("0") for uid in people}
        for expense in expenses:
            amount = Decimal(str(expense.amount))
            total += amount
            by_category[expense.category] = by_category.get(expense.category, Decimal("0")) + amount
            paid[expense.paid_by] = paid.get(expense.paid_by, Decimal("0")) + amount

        missing = [uid for uid in paid if uid not in people]
        if missing:
            result = await db.execute(select(Profile).where(Profile.id.in_(missing)))
            people.update({p.id: p for p in result.scalars().all()})

        share = (total / len(paid)) if paid else Decimal("0")
        balances = {uid: amount - share for uid, amount in paid.items()}

        budget = Decimal(str(trip.budget)) if trip.budget is not None else None
        return {
            "currency": trip.currency,
            "total_spent": _money(total),
            "by_category": {cat: _money(v) for cat, v in sorted(by_category.items())},
            "by_payer": [
                {"user_id": uid, "name": people[uid].display_name if uid in people else None, "paid": _money(v)}
                for uid, v in paid.items() if v > 0
            ],
            "planned": _money(planned),
            "budget": _money(budget) if budget is not None else None,
            "remaining": _money(budget - total) if budget is not None else None,
            "expense_count": len(expenses),
            "per_member_share": _money(share),
            "balances": [
                {
                    "user_id": uid,
                    "name": people[uid].display_name if uid in people else None,
                    "paid": _money(paid[uid]),
                    "balance": _money(balance),
                }
                for uid, balance in balances.items()
            ],
            "settlements": settle_up(balances),
        }


budget_service = BudgetService()
