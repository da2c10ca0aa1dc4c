"""
Attendance Record Store

One record per team member per calendar day. Working hours are derived
from "HH:MM" check-in / check-out strings unless the caller supplies them.
"""
from datetime import date
from typing import List, Optional, Tuple

from agency_hr.core.exceptions import BusinessRuleError, ConflictError
from agency_hr.core.security import sanitize_input
from agency_hr.models.attendance import Attendance, AttendanceStatus
from agency_hr.schemas.attendance import AttendanceCreate, AttendanceUpdate
from agency_hr.services.base import BaseService
from agency_hr.services.team_directory import TeamDirectoryService

STANDARD_WORKING_HOURS = 8.0


def _minutes(value: str) -> int:
    try:
        hours, minutes = value.split(":")
        hours, minutes = int(hours), int(minutes)
    except (AttributeError, ValueError):
        raise BusinessRuleError(f"Invalid time '{value}', expected HH:MM")
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise BusinessRuleError(f"Invalid time '{value}', expected HH:MM")
    return hours * 60 + minutes


def calculate_working_hours(check_in: str, check_out: str) -> Tuple[float, float]:
    """
    Split the elapsed time between two "HH:MM" strings into regular and
    overtime hours. Regular hours cap at 8; a check-out earlier than the
    check-in yields (0, 0).
    """
    elapsed = (_minutes(check_out) - _minutes(check_in)) / 60
    if elapsed <= 0:
        return 0.0, 0.0
    working = min(elapsed, STANDARD_WORKING_HOURS)
    overtime = max(0.0, elapsed - STANDARD_WORKING_HOURS)
    return round(working, 2), round(overtime, 2)


class AttendanceService(BaseService):

    def list_attendance(
        self,
        team_member_id: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        status: Optional[str] = None,
    ) -> List[Attendance]:
        query = self.db.query(Attendance)
        if team_member_id:
            query = query.filter(Attendance.team_member_id == team_member_id)
        if from_date:
            query = query.filter(Attendance.date >= from_date)
        if to_date:
            query = query.filter(Attendance.date <= to_date)
        if status:
            query = query.filter(Attendance.status == status)
        return query.order_by(Attendance.date.desc()).all()

    def get_attendance(self, attendance_id: str) -> Attendance:
        return self._get_or_404(Attendance, attendance_id, "Attendance record")

    def find_for_day(self, team_member_id: str, day: date) -> Optional[Attendance]:
        return self.db.query(Attendance).filter(
            Attendance.team_member_id == team_member_id,
            Attendance.date == day,
        ).first()

    def create_attendance(self, data: AttendanceCreate) -> Attendance:
        record = self._build(data)
        self._commit(f"Attendance for {data.date.isoformat()} already recorded")
        self.db.refresh(record)
        return record

    def bulk_create_attendance(self, records: List[AttendanceCreate]) -> List[Attendance]:
        """All-or-nothing insert of several days."""
        created = []
        try:
            for data in records:
                created.append(self._build(data))
                self.db.flush()
        except Exception:
            self.db.rollback()
            raise
        self._commit("One of the attendance days is already recorded")
        for record in created:
            self.db.refresh(record)
        self.log_info(f"Bulk created {len(created)} attendance records")
        return created

    def update_attendance(self, attendance_id: str, data: AttendanceUpdate) -> Attendance:
        record = self.get_attendance(attendance_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("date") and changes["date"] != record.date:
            self._ensure_day_free(record.team_member_id, changes["date"])
        if changes.get("status") is not None:
            changes["status"] = changes["status"].value
        if "notes" in changes:
            changes["notes"] = sanitize_input(changes["notes"])
        for field, value in changes.items():
            setattr(record, field, value)

        hours_given = "working_hours" in changes or "overtime_hours" in changes
        if record.check_in and record.check_out and not hours_given:
            record.working_hours, record.overtime_hours = calculate_working_hours(
                record.check_in, record.check_out
            )
        self._commit("Attendance for this day already recorded")
        self.db.refresh(record)
        return record

    def delete_attendance(self, attendance_id: str) -> None:
        record = self.get_attendance(attendance_id)
        self.db.delete(record)
        self._commit()

    def upsert_for_day(
        self,
        team_member_id: str,
        day: date,
        check_in: Optional[str] = None,
        check_out: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Attendance:
        """
        Set check-in and/or check-out on the member's record for ``day``,
        creating a PRESENT record when none exists. Flushes, never commits.
        """
        record = self.find_for_day(team_member_id, day)
        if record is None:
            record = Attendance(
                team_member_id=team_member_id,
                date=day,
                status=AttendanceStatus.PRESENT.value,
                working_hours=0.0,
                overtime_hours=0.0,
            )
            self.db.add(record)
        if check_in is not None:
            record.check_in = check_in
        if check_out is not None:
            record.check_out = check_out
        if notes is not None:
            record.notes = sanitize_input(notes)
        if record.check_in and record.check_out:
            record.working_hours, record.overtime_hours = calculate_working_hours(
                record.check_in, record.check_out
            )
        self.db.flush()
        return record

    def _build(self, data: AttendanceCreate) -> Attendance:
        TeamDirectoryService(self.db).get_member(data.team_member_id)
        self._ensure_day_free(data.team_member_id, data.date)

        working_hours, overtime_hours = data.working_hours, data.overtime_hours
        if data.check_in and data.check_out and working_hours is None:
            computed = calculate_working_hours(data.check_in, data.check_out)
            working_hours = computed[0]
            if overtime_hours is None:
                overtime_hours = computed[1]

        record = Attendance(
            team_member_id=data.team_member_id,
            date=data.date,
            check_in=data.check_in,
            check_out=data.check_out,
            status=data.status.value,
            working_hours=working_hours or 0.0,
            overtime_hours=overtime_hours or 0.0,
            notes=sanitize_input(data.notes),
        )
        self.db.add(record)
        return record

    def _ensure_day_free(self, team_member_id: str, day: date) -> None:
        if self.find_for_day(team_member_id, day):
            raise ConflictError(
                f"Attendance for {day.isoformat()} already recorded",
                details={"team_member_id": team_member_id, "date": day.isoformat()},
            )
