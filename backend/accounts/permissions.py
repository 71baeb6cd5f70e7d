from rest_framework import permissions


class Role:
    ADMIN = 'Admin'
    QUOTATION_CREATOR = 'QuotationCreator'
    BOOKING_CREATOR = 'BookingCreator'
    REVIEWER = 'Reviewer'


class Action:
    VIEW_DASHBOARD = 'view_dashboard'
    VIEW_QUOTATIONS = 'view_quotations'
    MANAGE_QUOTATIONS = 'manage_quotations'
    VIEW_BOOKINGS = 'view_bookings'
    MANAGE_BOOKINGS = 'manage_bookings'
    VIEW_REFERENCE_DATA = 'view_reference_data'
    MANAGE_REFERENCE_DATA = 'manage_reference_data'
    RESEED_DATA = 'reseed_data'
    GENERATE_SUMMARY = 'generate_summary'

    ALL = (
        VIEW_DASHBOARD, VIEW_QUOTATIONS, MANAGE_QUOTATIONS, VIEW_BOOKINGS, MANAGE_BOOKINGS,
        VIEW_REFERENCE_DATA, MANAGE_REFERENCE_DATA, RESEED_DATA, GENERATE_SUMMARY,
    )


# Actions every signed-in user may perform regardless of role.
EVERYONE = frozenset({Action.VIEW_DASHBOARD, Action.VIEW_REFERENCE_DATA})

POLICY = {
    Role.ADMIN: frozenset(Action.ALL),
    Role.QUOTATION_CREATOR: EVERYONE | {Action.VIEW_QUOTATIONS, Action.MANAGE_QUOTATIONS, Action.GENERATE_SUMMARY},
    Role.BOOKING_CREATOR: EVERYONE | {Action.VIEW_BOOKINGS, Action.MANAGE_BOOKINGS},
    Role.REVIEWER: EVERYONE | {Action.VIEW_QUOTATIONS, Action.VIEW_BOOKINGS},
}


def can_perform(role, action):
    """Single authorization policy: may a user with ``role`` perform ``action``?"""
    return action in POLICY.get(role, EVERYONE)


class HasAction(permissions.BasePermission):
    """
    Checks the action the view requires for the request method.

    Views declare ``required_actions = {'GET': Action.VIEW_QUOTATIONS, ...}``;
    a method with no entry only needs an authenticated user.
    """
    message = 'Your role does not allow this action.'

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        required = getattr(view, 'required_actions', {}).get(request.method)
        if required is None:
            return True
        role = Role.ADMIN if request.user.is_superuser else getattr(request.user, 'role', None)
        return can_perform(role, required)
