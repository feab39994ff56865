# ============================================================================
# app/services/salon/catalog_service.py
# Salon catalog management: salons, services, stylists, work hours, absences
# ============================================================================
from datetime import time
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from app.config.settings import get_settings
from app.core.errors import NotFoundError, ValidationError
from app.models.availability import Absence, WorkHourRule
from app.models.salon import Salon
from app.models.service import Service
from app.models.stylist import Stylist
from app.utils.time_window import parse_instant, parse_time_of_day

logger = logging.getLogger(__name__)

SERVICE_FIELDS = ("title", "duration_min", "price_cents", "active")
STYLIST_FIELDS = ("display_name", "avatar_url", "active", "is_apprentice", "user_id")


class SalonService:
    """Read access to salons"""

    @staticmethod
    def list_salons(db: Session) -> List[Salon]:
        return db.query(Salon).order_by(Salon.name.asc()).all()

    @staticmethod
    def get_salon(db: Session, salon_id: UUID) -> Salon:
        salon = db.query(Salon).filter(Salon.id == salon_id).first()
        if not salon:
            raise NotFoundError("salon_id", "salon not found")
        return salon

    @staticmethod
    def get_salon_by_slug(db: Session, slug: str) -> Salon:
        salon = db.query(Salon).filter(Salon.slug == slug).first()
        if not salon:
            raise NotFoundError("slug", "salon not found")
        return salon


class ServiceCatalogService:
    """CRUD for the services a salon offers"""

    @staticmethod
    def _validate(data: Dict[str, Any]) -> None:
        settings = get_settings()

        if "title" in data and not (data["title"] or "").strip():
            raise ValidationError("title", "required")

        duration = data.get("duration_min")
        if duration is not None and not (
                settings.SERVICE_MIN_DURATION <= duration <= settings.SERVICE_MAX_DURATION
        ):
            raise ValidationError(
                "duration_min",
                f"must be between {settings.SERVICE_MIN_DURATION} and {settings.SERVICE_MAX_DURATION}"
            )

        price = data.get("price_cents")
        if price is not None and not (0 <= price <= settings.SERVICE_MAX_PRICE_CENTS):
            raise ValidationError("price_cents", f"must be between 0 and {settings.SERVICE_MAX_PRICE_CENTS}")

    @staticmethod
    def list_services(db: Session, salon_id: UUID, include_inactive: bool = False) -> List[Service]:
        SalonService.get_salon(db, salon_id)
        query = db.query(Service).filter(Service.salon_id == salon_id)
        if not include_inactive:
            query = query.filter(Service.active.is_(True))
        return query.order_by(Service.title.asc()).all()

    @staticmethod
    def get_service(db: Session, service_id: UUID, salon_id: UUID) -> Service:
        service = db.query(Service).filter(
            Service.id == service_id,
            Service.salon_id == salon_id
        ).first()
        if not service:
            raise NotFoundError("service_id", "service not found")
        return service

    @staticmethod
    def create_service(db: Session, salon_id: UUID, data: Dict[str, Any]) -> Service:
        SalonService.get_salon(db, salon_id)
        for field in ("title", "duration_min", "price_cents"):
            if data.get(field) is None:
                raise ValidationError(field, "required")
        ServiceCatalogService._validate(data)

        service = Service(
            salon_id=salon_id,
            title=data["title"].strip(),
            duration_min=data["duration_min"],
            price_cents=data["price_cents"],
            active=data.get("active", True),
        )
        db.add(service)
        db.commit()
        db.refresh(service)

        logger.info(f"Created service {service.id}: {service.title}")
        return service

    @staticmethod
    def update_service(db: Session, service_id: UUID, salon_id: UUID, data: Dict[str, Any]) -> Service:
        service = ServiceCatalogService.get_service(db, service_id, salon_id)
        ServiceCatalogService._validate(data)

        for field in SERVICE_FIELDS:
            if field in data and data[field] is not None:
                value = data[field].strip() if field == "title" else data[field]
                setattr(service, field, value)

        db.commit()
        db.refresh(service)
        logger.info(f"Updated service {service.id}")
        return service

    @staticmethod
    def deactivate_service(db: Session, service_id: UUID, salon_id: UUID) -> Service:
        """Services referenced by bookings are never deleted, only deactivated"""
        service = ServiceCatalogService.get_service(db, service_id, salon_id)
        service.active = False
        db.commit()
        db.refresh(service)
        logger.info(f"Deactivated service {service.id}")
        return service


class StylistService:
    """CRUD for a salon's stylists"""

    @staticmethod
    def list_stylists(db: Session, salon_id: UUID, include_inactive: bool = False) -> List[Stylist]:
        SalonService.get_salon(db, salon_id)
        query = db.query(Stylist).filter(Stylist.salon_id == salon_id)
        if not include_inactive:
            query = query.filter(Stylist.active.is_(True))
        stylists = query.all()
        return sorted(stylists, key=lambda s: (s.display_name.lower(), str(s.id)))

    @staticmethod
    def get_stylist(db: Session, stylist_id: UUID, salon_id: UUID) -> Stylist:
        stylist = db.query(Stylist).filter(
            Stylist.id == stylist_id,
            Stylist.salon_id == salon_id
        ).first()
        if not stylist:
            raise NotFoundError("stylist_id", "stylist not found")
        return stylist

    @staticmethod
    def create_stylist(db: Session, salon_id: UUID, data: Dict[str, Any]) -> Stylist:
        SalonService.get_salon(db, salon_id)
        display_name = (data.get("display_name") or "").strip()
        if not display_name:
            raise ValidationError("display_name", "required")

        stylist = Stylist(
            salon_id=salon_id,
            user_id=data.get("user_id"),
            display_name=display_name,
            avatar_url=data.get("avatar_url"),
            active=data.get("active", True),
            is_apprentice=data.get("is_apprentice", False),
        )
        db.add(stylist)
        db.commit()
        db.refresh(stylist)

        logger.info(f"Created stylist {stylist.id}: {stylist.display_name}")
        return stylist

    @staticmethod
    def update_stylist(db: Session, stylist_id: UUID, salon_id: UUID, data: Dict[str, Any]) -> Stylist:
        stylist = StylistService.get_stylist(db, stylist_id, salon_id)
        if "display_name" in data and data["display_name"] is not None and not data["display_name"].strip():
            raise ValidationError("display_name", "required")

        for field in STYLIST_FIELDS:
            if field in data and data[field] is not None:
                value = data[field].strip() if field == "display_name" else data[field]
                setattr(stylist, field, value)

        db.commit()
        db.refresh(stylist)
        logger.info(f"Updated stylist {stylist.id}")
        return stylist

    @staticmethod
    def deactivate_stylist(db: Session, stylist_id: UUID, salon_id: UUID) -> Stylist:
        stylist = StylistService.get_stylist(db, stylist_id, salon_id)
        stylist.active = False
        db.commit()
        db.refresh(stylist)
        logger.info(f"Deactivated stylist {stylist.id}")
        return stylist


class WorkHourService:
    """
    CRUD for weekly work-hour rules.

    Rules of one stylist on one weekday must not overlap; adjacent rules
    (one ending exactly when the next starts) are allowed.
    """

    @staticmethod
    def _parse_window(start, end):
        start_time = parse_time_of_day(start, field="start")
        end_time = parse_time_of_day(end, field="end")
        if start_time >= end_time:
            raise ValidationError("end", "must be after start")
        return start_time, end_time

    @staticmethod
    def _validate_weekday(weekday) -> int:
        if not isinstance(weekday, int) or isinstance(weekday, bool) or not 0 <= weekday <= 6:
            raise ValidationError("weekday", "must be between 0 (Sunday) and 6 (Saturday)")
        return weekday

    @staticmethod
    def _ensure_no_overlap(
            db: Session,
            stylist_id: UUID,
            weekday: int,
            start_time: time,
            end_time: time,
            exclude_id: Optional[UUID] = None
    ) -> None:
        query = db.query(WorkHourRule).filter(
            WorkHourRule.stylist_id == stylist_id,
            WorkHourRule.weekday == weekday,
            WorkHourRule.start_time < end_time,
            WorkHourRule.end_time > start_time
        )
        if exclude_id is not None:
            query = query.filter(WorkHourRule.id != exclude_id)

        clash = query.first()
        if clash:
            raise ValidationError(
                "start",
                f"overlaps existing work hours {clash.start_time.strftime('%H:%M')}-"
                f"{clash.end_time.strftime('%H:%M')}"
            )

    @staticmethod
    def list_rules(db: Session, salon_id: UUID, stylist_id: UUID) -> List[WorkHourRule]:
        StylistService.get_stylist(db, stylist_id, salon_id)
        return db.query(WorkHourRule).filter(
            WorkHourRule.stylist_id == stylist_id
        ).order_by(WorkHourRule.weekday.asc(), WorkHourRule.start_time.asc()).all()

    @staticmethod
    def get_rule(db: Session, rule_id: UUID, salon_id: UUID) -> WorkHourRule:
        rule = db.query(WorkHourRule).filter(
            WorkHourRule.id == rule_id,
            WorkHourRule.salon_id == salon_id
        ).first()
        if not rule:
            raise NotFoundError("work_hour_id", "work hours not found")
        return rule

    @staticmethod
    def create_rule(db: Session, salon_id: UUID, stylist_id: UUID, weekday, start, end) -> WorkHourRule:
        StylistService.get_stylist(db, stylist_id, salon_id)
        weekday = WorkHourService._validate_weekday(weekday)
        start_time, end_time = WorkHourService._parse_window(start, end)
        WorkHourService._ensure_no_overlap(db, stylist_id, weekday, start_time, end_time)

        rule = WorkHourRule(
            salon_id=salon_id,
            stylist_id=stylist_id,
            weekday=weekday,
            start_time=start_time,
            end_time=end_time,
        )
        db.add(rule)
        db.commit()
        db.refresh(rule)

        logger.info(f"Created work hours {rule.id} for stylist {stylist_id}: day {weekday} {start_time}-{end_time}")
        return rule

    @staticmethod
    def update_rule(db: Session, rule_id: UUID, salon_id: UUID, data: Dict[str, Any]) -> WorkHourRule:
        rule = WorkHourService.get_rule(db, rule_id, salon_id)

        weekday = rule.weekday
        if data.get("weekday") is not None:
            weekday = WorkHourService._validate_weekday(data["weekday"])
        start_time, end_time = WorkHourService._parse_window(
            data.get("start") or rule.start_time,
            data.get("end") or rule.end_time
        )
        WorkHourService._ensure_no_overlap(db, rule.stylist_id, weekday, start_time, end_time, exclude_id=rule.id)

        rule.weekday = weekday
        rule.start_time = start_time
        rule.end_time = end_time
        db.commit()
        db.refresh(rule)
        logger.info(f"Updated work hours {rule.id}")
        return rule

    @staticmethod
    def delete_rule(db: Session, rule_id: UUID, salon_id: UUID) -> None:
        rule = WorkHourService.get_rule(db, rule_id, salon_id)
        db.delete(rule)
        db.commit()
        logger.info(f"Deleted work hours {rule_id}")


class AbsenceService:
    """CRUD for stylist absences"""

    @staticmethod
    def list_absences(db: Session, salon_id: UUID, stylist_id: UUID) -> List[Absence]:
        StylistService.get_stylist(db, stylist_id, salon_id)
        return db.query(Absence).filter(
            Absence.stylist_id == stylist_id
        ).order_by(Absence.starts_at.asc()).all()

    @staticmethod
    def get_absence(db: Session, absence_id: UUID, salon_id: UUID) -> Absence:
        absence = db.query(Absence).filter(
            Absence.id == absence_id,
            Absence.salon_id == salon_id
        ).first()
        if not absence:
            raise NotFoundError("absence_id", "absence not found")
        return absence

    @staticmethod
    def create_absence(
            db: Session,
            salon_id: UUID,
            stylist_id: UUID,
            starts_at,
            ends_at,
            reason: Optional[str] = None
    ) -> Absence:
        salon = SalonService.get_salon(db, salon_id)
        StylistService.get_stylist(db, stylist_id, salon_id)

        start = parse_instant(starts_at, salon.timezone, field="starts_at")
        end = parse_instant(ends_at, salon.timezone, field="ends_at")
        if start >= end:
            raise ValidationError("ends_at", "must be after starts_at")

        absence = Absence(
            salon_id=salon_id,
            stylist_id=stylist_id,
            starts_at=start,
            ends_at=end,
            reason=reason,
        )
        db.add(absence)
        db.commit()
        db.refresh(absence)

        logger.info(f"Created absence {absence.id} for stylist {stylist_id}")
        return absence

    @staticmethod
    def delete_absence(db: Session, absence_id: UUID, salon_id: UUID) -> None:
        absence = AbsenceService.get_absence(db, absence_id, salon_id)
        db.delete(absence)
        db.commit()
        logger.info(f"Deleted absence {absence_id}")
