from gateway.views.auth_handlers import (
    login as login,
)
from gateway.views.auth_handlers import (
    login_page as login_page,
)
from gateway.views.auth_handlers import (
    logout as logout,
)
from gateway.views.auth_handlers import (
    signup as signup,
)
from gateway.views.auth_handlers import (
    signup_page as signup_page,
)
from gateway.views.handlers import (
    dashboard_page as dashboard_page,
)
from gateway.views.handlers import (
    health as health,
)
from gateway.views.handlers import (
    home as home,
)
from gateway.views.templates import create_templates as create_templates
