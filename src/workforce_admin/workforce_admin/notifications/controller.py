from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..common.web import arg_date, current_profile_id, current_role, form_ids, login_required, permission_required
from ..core.enums import NotificationActionType, NotificationPriority, Permission
from ..core.exceptions import DomainError
from ..container import Container
from .service import NotificationInput

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.context_processor
    def inject_unread_notifications():
        if "profile_id" not in session:
            return {}
        try:
            return {"unread_notifications": container.notification_service.unread_count(int(session["profile_id"]))}
        except Exception:
            logger.exception("Counting unread notifications failed")
            return {"unread_notifications": 0}

    @app.route("/notifications", endpoint="notifications")
    @permission_required(Permission.NOTIFICATIONS_VIEW)
    def notifications():
        try:
            start, end = arg_date("start"), arg_date("end")
        except DomainError as e:
            flash(str(e), "danger")
            start = end = None
        items = container.notification_service.inbox(
            current_profile_id(),
            start=start,
            end=end,
            unread_only=request.args.get("unread") == "1",
        )
        return render_template("notifications/index.html", notifications=items, active_page="notifications")

    @app.route("/notifications/new", methods=["GET", "POST"], endpoint="new_notification")
    @permission_required(Permission.NOTIFICATIONS_CREATE)
    def new_notification():
        if request.method == "POST":
            f = request.form
            try:
                count = container.notification_service.send(
                    current_role=current_role(),
                    sender_profile_id=current_profile_id(),
                    data=NotificationInput(
                        recipient_ids=form_ids("recipient_ids"),
                        title=f.get("title", ""),
                        message=f.get("message", ""),
                        type=f.get("type") or "general",
                        priority=f.get("priority") or NotificationPriority.MEDIUM.value,
                        action_type=f.get("action_type") or NotificationActionType.NONE.value,
                    ),
                )
                flash(f"Notification sent to {count} recipient(s)", "success")
                return redirect(url_for("notifications"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Sending notification failed")
                flash("System error while sending the notification", "danger")

        return render_template(
            "notifications/form.html",
            profiles=container.profile_service.list_profiles(active_only=True),
            priorities=list(NotificationPriority),
            action_types=list(NotificationActionType),
            active_page="notifications",
        )

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="api_notification_read")
    @login_required
    def api_notification_read(notification_id: int):
        try:
            container.notification_service.mark_read(notification_id=notification_id, profile_id=current_profile_id())
            return jsonify({"success": True, "message": "Marked as read"}), 200
        except DomainError as e:
            return jsonify({"success": False, "message": str(e)}), 400

    @app.route("/api/notifications/read-all", methods=["POST"], endpoint="api_notifications_read_all")
    @login_required
    def api_notifications_read_all():
        count = container.notification_service.mark_all_read(profile_id=current_profile_id())
        return jsonify({"success": True, "message": f"{count} notification(s) marked as read"}), 200

    @app.route(
        "/api/notifications/<int:notification_id>/action",
        methods=["POST"],
        endpoint="api_notification_action",
    )
    @login_required
    def api_notification_action(notification_id: int):
        try:
            n = container.notification_service.take_action(
                notification_id=notification_id,
                profile_id=current_profile_id(),
            )
            return jsonify({"success": True, "message": f"Action '{n.action_type.value}' recorded"}), 200
        except DomainError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Notification action %s failed", notification_id)
            return jsonify({"success": False, "message": "System error while recording the action"}), 500

    @app.route("/notifications/<int:notification_id>/delete", methods=["POST"], endpoint="delete_notification")
    @login_required
    def delete_notification(notification_id: int):
        try:
            container.notification_service.delete(notification_id=notification_id, profile_id=current_profile_id())
            flash("Notification deleted", "success")
        except DomainError as e:
            flash(str(e), "danger")
        return redirect(url_for("notifications"))
