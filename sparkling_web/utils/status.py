"""
Display configuration for booking, job assignment and payment statuses.

Each lookup returns a dict with ``color`` (CSS classes), ``text`` and
``description``; booking statuses also carry an ``icon`` name. Long-distance
bookings read differently for the quote stages because a staff member prepares
the quote instead of movers bidding.
"""

from typing import Optional

LONG_DISTANCE = "long-distance"

BADGE_BASE_CLASS = "inline-flex items-center px-2.5 py-0.5 rounded-full text-xs font-medium"

UNKNOWN_COLOR = "bg-gray-100 text-gray-800"
UNKNOWN_DESCRIPTION = "Status unknown"

_QUOTE_IN_PROGRESS = {
    "color": "bg-blue-100 text-blue-800",
    "text": "Quote in progress",
    "icon": "message-square",
    "description": "Our team is preparing your personalized quote",
}

BOOKING_STATUS_CONFIG = {
    "pending-assignment": {
        "color": "bg-yellow-100 text-yellow-800",
        "text": "Looking for movers available",
        "icon": "search",
        "description": "We are searching for available movers in your area",
    },
    "quote-requested": {
        "color": "bg-blue-100 text-blue-800",
        "text": "Quote requested",
        "icon": "message-square",
        "description": "Waiting for movers to provide quotes",
    },
    "quote-provided": {
        "color": "bg-purple-100 text-purple-800",
        "text": "Quote provided",
        "icon": "dollar-sign",
        "description": "Mover has provided a quote, waiting for your approval",
    },
    "quote-accepted": {
        "color": "bg-green-100 text-green-800",
        "text": "Quote accepted",
        "icon": "check-circle",
        "description": "You have accepted the quote, booking is confirmed",
    },
    "confirmed": {
        "color": "bg-green-100 text-green-800",
        "text": "Confirmed",
        "icon": "check-circle",
        "description": "Booking is confirmed and ready for move day",
    },
    "in-progress": {
        "color": "bg-purple-100 text-purple-800",
        "text": "In progress",
        "icon": "truck",
        "description": "Your move is currently in progress",
    },
    "completed": {
        "color": "bg-blue-100 text-blue-800",
        "text": "Completed",
        "icon": "check-circle",
        "description": "Your move has been completed successfully",
    },
    "cancelled": {
        "color": "bg-red-100 text-red-800",
        "text": "Cancelled",
        "icon": "x-circle",
        "description": "This booking has been cancelled",
    },
    "disputed": {
        "color": "bg-orange-100 text-orange-800",
        "text": "Disputed",
        "icon": "alert-triangle",
        "description": "This booking is under dispute",
    },
    "long-distance-pending": _QUOTE_IN_PROGRESS,
    "long-distance-quote-ready": {
        "color": "bg-purple-100 text-purple-800",
        "text": "Quote ready",
        "icon": "dollar-sign",
        "description": "Your personalized quote is ready for review",
    },
    "long-distance-quote-approved": {
        "color": "bg-green-100 text-green-800",
        "text": "Quote approved",
        "icon": "check-circle",
        "description": "You have approved the quote, booking is confirmed",
    },
}

# Only the keys that differ for long-distance bookings
LONG_DISTANCE_BOOKING_OVERRIDES = {
    "pending-assignment": _QUOTE_IN_PROGRESS,
    "quote-requested": {
        "text": "Quote in progress",
        "description": "Our team is preparing your personalized quote",
    },
    "quote-provided": {
        "text": "Quote ready",
        "description": "Your personalized quote is ready for review",
    },
    "quote-accepted": {
        "text": "Quote approved",
        "description": "You have approved the quote, booking is confirmed",
    },
}

JOB_ASSIGNMENT_STATUS_CONFIG = {
    "unassigned": {
        "color": "bg-gray-100 text-gray-800",
        "text": "Unassigned",
        "description": "No mover has been assigned yet",
    },
    "alerted": {
        "color": "bg-yellow-100 text-yellow-800",
        "text": "Alerted",
        "description": "Job alerts have been sent to movers",
    },
    "claimed": {
        "color": "bg-blue-100 text-blue-800",
        "text": "Claimed",
        "description": "A mover has claimed this job",
    },
    "assigned": {
        "color": "bg-green-100 text-green-800",
        "text": "Assigned",
        "description": "Job has been assigned to a mover",
    },
    "completed": {
        "color": "bg-blue-100 text-blue-800",
        "text": "Completed",
        "description": "Job has been completed",
    },
}

PAYMENT_STATUS_CONFIG = {
    "pending": {
        "color": "bg-yellow-100 text-yellow-800",
        "text": "Pending",
        "description": "Payment is pending",
    },
    "deposit-paid": {
        "color": "bg-blue-100 text-blue-800",
        "text": "Deposit paid",
        "description": "Deposit has been paid",
    },
    "paid": {
        "color": "bg-green-100 text-green-800",
        "text": "Paid",
        "description": "Payment completed",
    },
    "failed": {
        "color": "bg-red-100 text-red-800",
        "text": "Failed",
        "description": "Payment failed",
    },
    "refunded": {
        "color": "bg-orange-100 text-orange-800",
        "text": "Refunded",
        "description": "Payment has been refunded",
    },
    "long-distance-pending": {
        "color": "bg-blue-100 text-blue-800",
        "text": "Quote in progress",
        "description": "Customer waiting for quote details",
    },
    "long-distance-quote-ready": {
        "color": "bg-purple-100 text-purple-800",
        "text": "Quote ready",
        "description": "Quote prepared, awaiting customer approval",
    },
}

LONG_DISTANCE_PAYMENT_OVERRIDES = {
    "pending": {
        "color": "bg-blue-100 text-blue-800",
        "text": "Quote in progress",
        "description": "Customer waiting for quote details",
    },
}


def _unknown(status: Optional[str], with_icon: bool = False) -> dict:
    config = {
        "color": UNKNOWN_COLOR,
        "text": status or "Unknown",
        "description": UNKNOWN_DESCRIPTION,
    }
    if with_icon:
        config["icon"] = "help-circle"
    return config


def get_booking_status_config(status: Optional[str], move_type: str = "residential") -> dict:
    config = BOOKING_STATUS_CONFIG.get(status)
    if config is None:
        return _unknown(status, with_icon=True)
    if move_type == LONG_DISTANCE and status in LONG_DISTANCE_BOOKING_OVERRIDES:
        return {**config, **LONG_DISTANCE_BOOKING_OVERRIDES[status]}
    return dict(config)


def get_job_assignment_status_config(status: Optional[str]) -> dict:
    config = JOB_ASSIGNMENT_STATUS_CONFIG.get(status)
    if config is None:
        return _unknown(status)
    return dict(config)


def get_payment_status_config(status: Optional[str], move_type: str = "residential") -> dict:
    config = PAYMENT_STATUS_CONFIG.get(status)
    if config is None:
        return _unknown(status)
    if move_type == LONG_DISTANCE and status in LONG_DISTANCE_PAYMENT_OVERRIDES:
        return {**config, **LONG_DISTANCE_PAYMENT_OVERRIDES[status]}
    return dict(config)


def get_status_badge(
    status: Optional[str], type: str = "booking", move_type: str = "residential"
) -> dict:
    """Badge class, text and description for a status; type is booking, payment or job-assignment"""
    if type == "job-assignment":
        config = get_job_assignment_status_config(status)
    elif type == "payment":
        config = get_payment_status_config(status, move_type)
    else:
        config = get_booking_status_config(status, move_type)

    return {
        "className": f"{BADGE_BASE_CLASS} {config['color']}",
        "text": config["text"],
        "description": config["description"],
    }
