from __future__ import annotations

import pytest

from src.workforce_admin.workforce_admin.core.enums import Role
from src.workforce_admin.workforce_admin.core.exceptions import AuthorizationError, ValidationError
from src.workforce_admin.workforce_admin.notifications.service import NotificationInput


def _input(recipients, **overrides) -> NotificationInput:
    data = {"recipient_ids": recipients, "title": "Roster", "message": "Please confirm next week"}
    data.update(overrides)
    return NotificationInput(**data)


def test_single_send_needs_create_permission(container, seed):
    sender = seed.profile("Ops Lead", role=Role.OPERATION)
    worker = seed.profile("Sam Hill")

    count = container.notification_service.send(current_role=Role.OPERATION, sender_profile_id=sender, data=_input([worker]))

    assert count == 1
    assert container.notification_service.unread_count(worker) == 1

    with pytest.raises(AuthorizationError):
        container.notification_service.send(current_role=Role.EMPLOYEE, sender_profile_id=worker, data=_input([sender]))


def test_bulk_send_needs_bulk_permission(container, seed):
    sender = seed.profile("Ops Lead", role=Role.OPERATION)
    a = seed.profile("Sam Hill")
    b = seed.profile("Kim Ng")

    with pytest.raises(AuthorizationError):
        container.notification_service.send(current_role=Role.OPERATION, sender_profile_id=sender, data=_input([a, b]))

    assert container.notification_service.send(current_role=Role.ADMIN, sender_profile_id=sender, data=_input([a, b, a])) == 2


def test_unknown_recipient_rejected(container, seed):
    sender = seed.profile("Root Admin", role=Role.ADMIN)

    with pytest.raises(ValidationError):
        container.notification_service.send(current_role=Role.ADMIN, sender_profile_id=sender, data=_input([999]))


def test_action_can_be_taken_once(container, seed):
    worker = seed.profile("Sam Hill")
    container.notification_service.notify(_input([worker], action_type="confirm"))
    n = container.notification_service.inbox(worker)[0]
    assert n.needs_action

    container.notification_service.take_action(notification_id=n.notification_id, profile_id=worker)

    assert not container.notification_service.inbox(worker)[0].needs_action
    with pytest.raises(ValidationError):
        container.notification_service.take_action(notification_id=n.notification_id, profile_id=worker)


def test_plain_notification_has_no_action(container, seed):
    worker = seed.profile("Sam Hill")
    container.notification_service.notify(_input([worker]))
    n = container.notification_service.inbox(worker)[0]

    with pytest.raises(ValidationError):
        container.notification_service.take_action(notification_id=n.notification_id, profile_id=worker)


def test_only_recipient_can_touch_a_notification(container, seed):
    worker = seed.profile("Sam Hill")
    other = seed.profile("Kim Ng")
    container.notification_service.notify(_input([worker], action_type="approve"))
    n = container.notification_service.inbox(worker)[0]

    with pytest.raises(AuthorizationError):
        container.notification_service.mark_read(notification_id=n.notification_id, profile_id=other)
    with pytest.raises(AuthorizationError):
        container.notification_service.delete(notification_id=n.notification_id, profile_id=other)


def test_mark_all_read(container, seed):
    worker = seed.profile("Sam Hill")
    container.notification_service.notify(_input([worker]))
    container.notification_service.notify(_input([worker], title="Payslip"))

    assert container.notification_service.mark_all_read(profile_id=worker) == 2
    assert container.notification_service.unread_count(worker) == 0
    assert container.notification_service.inbox(worker, unread_only=True) == []


def test_invalid_priority_rejected(container, seed):
    worker = seed.profile("Sam Hill")

    with pytest.raises(ValidationError):
        container.notification_service.notify(_input([worker], priority="urgent"))
