"""Localized user-facing texts (notification titles/bodies, sign-in errors).

Keys are stable; templates use str.format placeholders. The active locale
comes from settings.locale; unknown keys fall back to English.
"""

from typing import Any

from app.core.config import get_settings

_CATALOG: dict[str, dict[str, str]] = {
    "en": {
        "notify.assignment.title": "New task assigned",
        "notify.assignment.body": 'You have been assigned the task "{title}".',
        "notify.next.title": "New task",
        "notify.next.body": 'You can start the task "{title}" now.',
        "notify.approval.title": "Task approval requested",
        "notify.approval.body": 'The task "{title}" has been completed and is awaiting approval.',
        "notify.completion.title": "Task approved",
        "notify.completion.body": 'The task "{title}" was approved by {approver}.',
        "notify.reminder.title": "Task due soon",
        "notify.reminder.body": 'The task "{title}" is due within {minutes} minutes.',
        "notify.feedback.title": "New feedback",
        "notify.feedback.body": '{author} rated the task "{title}" {rating}/5.',
        "notify.mention.title": "You were mentioned",
        "notify.mention.body": '{author} mentioned you on the task "{title}".',
        "auth.invalid_credential": "Incorrect email or password.",
        "auth.user_not_found": "No account found with this email.",
        "auth.wrong_password": "Incorrect password.",
        "auth.too_many_requests": "Too many failed sign-in attempts. Please try again later.",
        "auth.user_disabled": "This account has been disabled.",
        "auth.unknown": "An error occurred while signing in. Please try again.",
        "gate.unknown_predecessor": "Previous assignee",
        "profile.default_role": "Staff",
        "profile.default_dept": "Unassigned",
    },
    "vi": {
        "notify.assignment.title": "Công việc mới được giao",
        "notify.assignment.body": 'Bạn đã được giao công việc "{title}".',
        "notify.next.title": "Công việc mới",
        "notify.next.body": 'Bạn có thể bắt đầu công việc "{title}" bây giờ.',
        "notify.approval.title": "Yêu cầu phê duyệt công việc",
        "notify.approval.body": 'Công việc "{title}" đã được hoàn thành và đang chờ phê duyệt.',
        "notify.completion.title": "Công việc đã được phê duyệt",
        "notify.completion.body": 'Công việc "{title}" đã được phê duyệt bởi {approver}.',
        "notify.reminder.title": "Công việc sắp đến hạn",
        "notify.reminder.body": 'Công việc "{title}" sẽ đến hạn trong vòng {minutes} phút.',
        "notify.feedback.title": "Đánh giá mới",
        "notify.feedback.body": '{author} đã đánh giá công việc "{title}" {rating}/5.',
        "notify.mention.title": "Bạn được nhắc đến",
        "notify.mention.body": '{author} đã nhắc đến bạn trong công việc "{title}".',
        "auth.invalid_credential": "Email hoặc mật khẩu không chính xác.",
        "auth.user_not_found": "Không tìm thấy tài khoản với email này.",
        "auth.wrong_password": "Mật khẩu không chính xác.",
        "auth.too_many_requests": "Quá nhiều lần đăng nhập thất bại. Vui lòng thử lại sau.",
        "auth.user_disabled": "Tài khoản này đã bị vô hiệu hóa.",
        "auth.unknown": "Đã xảy ra lỗi khi đăng nhập. Vui lòng thử lại.",
        "gate.unknown_predecessor": "Người dùng trước",
        "profile.default_role": "Nhân viên",
        "profile.default_dept": "Chưa phân công",
    },
}


def translate(key: str, locale: str | None = None, **params: Any) -> str:
    """Return the localized text for key, formatted with params.

    Args:
        key: Catalog key (e.g. 'notify.reminder.title').
        locale: 'en' or 'vi'; defaults to settings.locale.
        **params: Placeholder values.

    Raises:
        KeyError: If key is missing from the English catalog.
    """
    lang = locale or get_settings().locale
    template = _CATALOG.get(lang, {}).get(key) or _CATALOG["en"][key]
    return template.format(**params) if params else template
