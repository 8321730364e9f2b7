"""
Activity review workflow.

An activity starts ``pending`` and is moved exactly once to ``approved`` or
``rejected`` by a faculty member or admin whose access scope covers the
owning student. Credits are awarded only together with an approval.
"""

import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from backend.exceptions import AlreadyReviewed, CreditsNotAllowed

from .access import Operation, ensure_in_scope
from .models import Activity

logger = logging.getLogger(__name__)

DECISIONS = (Activity.Status.APPROVED, Activity.Status.REJECTED)
DELETED_REVIEWER_NOTE = "Previously approved by {name} (deleted account)"


def plan_review(activity, reviewer, decision, remarks=None, credits=None):
    """
    Compute the field changes for reviewing ``activity``.

    Nothing is written; the returned dict is applied by ``review_activity``.

    Args:
        activity: Activity instance with its student loaded
        reviewer: acting faculty or admin user
        decision: 'approved' or 'rejected'
        remarks: optional reviewer note
        credits: optional credit award, only valid with an approval

    Returns:
        dict: field name to new value

    Raises:
        OutOfScope: owning student is outside the reviewer's scope
        CreditsNotAllowed: credits supplied with a rejection
        AlreadyReviewed: activity is no longer pending
    """
    if decision not in DECISIONS:
        raise ValueError(f"Unsupported review decision: {decision!r}")

    ensure_in_scope(reviewer, Operation.APPROVE_ACTIVITY, activity.student)

    if credits is not None and decision == Activity.Status.REJECTED:
        raise CreditsNotAllowed(activity=activity.pk)

    if activity.status != Activity.Status.PENDING:
        raise AlreadyReviewed(
            f"Activity has already been {activity.status}",
            activity=activity.pk,
            status=activity.status,
        )

    changes = {
        'status': decision,
        'approved_by': reviewer,
        'remarks': remarks or None,
    }
    if decision == Activity.Status.APPROVED and credits is not None:
        credits = Decimal(str(credits))
        if credits < 0 or credits > Decimal(str(settings.REVIEW_MAX_CREDITS)):
            raise ValueError(f"Credits out of range: {credits}")
        changes['credits'] = credits
    return changes


def review_activity(activity, reviewer, decision, remarks=None, credits=None):
    """
    Apply a review decision.

    The update is guarded by ``status='pending'`` so a concurrent review that
    landed first makes this one fail instead of overwriting it.
    """
    changes = plan_review(activity, reviewer, decision, remarks=remarks, credits=credits)

    with transaction.atomic():
        updated = Activity.objects.filter(
            pk=activity.pk,
            status=Activity.Status.PENDING,
        ).update(updated_at=timezone.now(), **changes)

        if not updated:
            logger.warning(f"Review of activity {activity.pk} by user {reviewer.pk} lost to a concurrent review")
            raise AlreadyReviewed(activity=activity.pk)

    activity.refresh_from_db()
    logger.info(
        f"Activity {activity.pk} {decision} by {reviewer.email} "
        f"(credits={activity.credits})"
    )
    return activity


def delete_user_cascade(user):
    """
    Delete a user together with the records that depend on it.

    Activities owned by the user are removed. Activities the user reviewed
    keep their decision but lose the reviewer reference, and an attribution
    note is appended to their remarks.

    Returns:
        dict: counts of deleted and detached activities
    """
    note = DELETED_REVIEWER_NOTE.format(name=user.name)

    with transaction.atomic():
        deleted, _ = Activity.objects.filter(student=user).delete()

        reviewed = list(Activity.objects.select_for_update().filter(approved_by=user))
        for activity in reviewed:
            activity.approved_by = None
            activity.remarks = f"{activity.remarks}\n{note}" if activity.remarks else note
        Activity.objects.bulk_update(reviewed, ['approved_by', 'remarks'])

        user_id, email = user.pk, user.email
        user.delete()

    logger.info(
        f"Deleted user {user_id} ({email}): {deleted} owned activities removed, "
        f"{len(reviewed)} reviewed activities detached"
    )
    return {
        'deletedActivities': deleted,
        'detachedReviews': len(reviewed),
    }
