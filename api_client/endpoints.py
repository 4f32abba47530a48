"""Backend endpoint paths, relative to API_URL"""

AUTH_LOGIN = "/auth/login"
AUTH_LOGOUT = "/auth/logout"
AUTH_ME = "/auth/me"
AUTH_REFRESH = "/auth/refresh"
AUTH_CHANGE_PASSWORD = "/auth/change-password"
AUTH_CHANGE_USERNAME = "/auth/change-username"

# Endpoints whose 401 must never start a token refresh, otherwise a failing
# refresh call would try to refresh itself
SKIP_REFRESH_ENDPOINTS = (
    AUTH_LOGIN,
    AUTH_REFRESH,
    AUTH_LOGOUT,
)


def is_skip_refresh_endpoint(path: str, skip_list=SKIP_REFRESH_ENDPOINTS) -> bool:
    """Check whether a request path matches the refresh skip-list"""
    if not path:
        return False
    return any(endpoint in path for endpoint in skip_list)
