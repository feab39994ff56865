# ============================================================================
# app/services/roster/roster_service.py
# Candidate stylists and their work-hour rules for one salon-local date
# ============================================================================
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union
from datetime import date
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, MSG_STYLIST_NOT_FOUND
from app.models.stylist import Stylist
from app.models.availability import WorkHourRule
from app.utils.time_window import local_weekday, parse_date

logger = logging.getLogger(__name__)


@dataclass
class RosterEntry:
    """One eligible stylist with the rules matching the requested weekday"""
    stylist: Stylist
    rules: List[WorkHourRule] = field(default_factory=list)

    @property
    def stylist_id(self) -> UUID:
        return self.stylist.id


class RosterService:
    """Read-only composition over Stylist + WorkHourRule"""

    @staticmethod
    def get_active_stylist(db: Session, salon_id: UUID, stylist_id: UUID) -> Stylist:
        """Load a stylist that is active and belongs to the salon, else NotFoundError"""
        stylist = db.query(Stylist).filter(
            Stylist.id == stylist_id,
            Stylist.salon_id == salon_id,
            Stylist.active.is_(True)
        ).first()

        if not stylist:
            raise NotFoundError("stylist_id", MSG_STYLIST_NOT_FOUND)
        return stylist

    @staticmethod
    def list_active_stylists(db: Session, salon_id: UUID) -> List[Stylist]:
        """All active stylists of a salon in roster order (display name, then id)"""
        stylists = db.query(Stylist).filter(
            Stylist.salon_id == salon_id,
            Stylist.active.is_(True)
        ).all()
        return sorted(stylists, key=lambda s: (s.display_name.lower(), str(s.id)))

    @staticmethod
    def resolve_roster(
            db: Session,
            salon_id: UUID,
            on_date: Union[str, date],
            stylist_id: Optional[UUID] = None
    ) -> List[RosterEntry]:
        """
        Return the candidate stylists for a salon and date.

        With ``stylist_id`` the roster holds that single stylist (NotFoundError
        when inactive, missing or in another salon). Without it every active
        stylist is returned, including those with no rule on that weekday.
        """
        weekday = local_weekday(parse_date(on_date))

        if stylist_id is not None:
            stylists = [RosterService.get_active_stylist(db, salon_id, stylist_id)]
        else:
            stylists = RosterService.list_active_stylists(db, salon_id)

        if not stylists:
            return []

        rules = db.query(WorkHourRule).filter(
            WorkHourRule.salon_id == salon_id,
            WorkHourRule.weekday == weekday,
            WorkHourRule.stylist_id.in_([s.id for s in stylists])
        ).all()

        rules_by_stylist: Dict[UUID, List[WorkHourRule]] = {}
        for rule in rules:
            rules_by_stylist.setdefault(rule.stylist_id, []).append(rule)

        roster = [
            RosterEntry(
                stylist=stylist,
                rules=sorted(rules_by_stylist.get(stylist.id, []), key=lambda r: (r.start_time, r.end_time))
            )
            for stylist in stylists
        ]

        logger.debug(
            f"Resolved roster for salon {salon_id} weekday {weekday}: "
            f"{len(roster)} stylists, {len(rules)} rules"
        )
        return roster
