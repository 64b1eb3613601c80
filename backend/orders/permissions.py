from rest_framework import permissions


class IsOrderOwnerOrManager(permissions.BasePermission):
    """
    Waiters may only see and act on orders they own; managers and admins
    may act on any order.
    """

    message = "You can only manage your own orders."

    def has_object_permission(self, request, view, obj):
        user = request.user
        if user.is_manager_or_higher:
            return True

        order = obj.order if hasattr(obj, "order") else obj
        return order.waiter_id == user.pk
