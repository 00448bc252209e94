"""Which chrome a page gets: public header/footer, none, or the admin sidebar"""

BARE_PATHS = {
    "/login",
    "/register",
    "/forgot-password",
    "/reset-password",
    "/terms",
    "/privacy",
    "/admin/login",
}


def hide_header_footer(path: str) -> bool:
    return path in BARE_PATHS or path.startswith("/reset-password/")


def is_admin_route(path: str) -> bool:
    return path.startswith("/admin")


def show_header_footer(path: str) -> bool:
    return not hide_header_footer(path) and not is_admin_route(path)


def uses_admin_layout(path: str) -> bool:
    return is_admin_route(path) and not hide_header_footer(path)


ADMIN_NAVIGATION = [
    {"name": "Dashboard", "href": "/admin/dashboard"},
    {"name": "Users", "href": "/admin/users"},
    {"name": "Movers", "href": "/admin/movers"},
    {"name": "Admins", "href": "/admin/admins"},
    {"name": "Bookings", "href": "/admin/bookings"},
    {"name": "Payments", "href": "/admin/payments"},
    {"name": "Analytics", "href": "/admin/analytics"},
    {"name": "Settings", "href": "/admin/settings"},
]
