"""
=============================================================================
EXAMPLE: A SMALL APPLICATION ROUTER
=============================================================================

Shows every registration feature in one place:

1. Global middleware (access log, error handling)
2. Static, parameterised and wildcard routes
3. A route group with its own CORS middleware and auth short-circuit
4. A REST resource generated from a controller
5. A catch-all route registered last, so it only sees the leftovers

Try it without a server:

    python -m rota routes examples.app:router
    python -m rota dispatch examples.app:router GET /hello/World
    python -m rota dispatch examples.app:router GET /api/users/2
    python -m rota dispatch examples.app:router GET /api/admin/stats
    python -m rota dispatch examples.app:router GET /api/admin/stats -H "Authorization: Bearer letmein"
    python -m rota dispatch examples.app:router GET /files/docs/readme.txt
    python -m rota dispatch examples.app:router GET /posts/7
    python -m rota dispatch examples.app:router GET /no/such/page

=============================================================================
"""

from rota import (
    Router,
    RouterConfig,
    Controller,
    ResponseBuilder,
    HTTPStatus,
    ok,
    created,
    json_response,
    unauthorized,
)
from rota.middleware import ErrorHandlerMiddleware, CORSMiddleware


# =============================================================================
# DATA
# =============================================================================

USERS = {
    1: {"id": 1, "name": "Alice", "email": "alice@example.com"},
    2: {"id": 2, "name": "Bob", "email": "bob@example.com"},
    3: {"id": 3, "name": "Charlie", "email": "charlie@example.com"},
}

ADMIN_TOKEN = "letmein"


# =============================================================================
# HANDLERS
# =============================================================================

def home(request, proceed):
    return ok("Rota example application. See /hello, /api/users, /files/*, /posts.")


def hello(request, proceed):
    return ok("Hello, rota!")


def hello_name(request, proceed):
    return ok(f"Hello, {request.params['name']}!")


def show_file(request, proceed):
    # "/files/" matches too, with an empty path
    return ok({"requested": request.params["path"]})


def list_users(request, proceed):
    return ok({"users": list(USERS.values())})


def get_user(request, proceed):
    try:
        user_id = int(request.params["id"])
    except ValueError:
        return json_response({"error": "Invalid user ID"}, HTTPStatus.BAD_REQUEST)

    user = USERS.get(user_id)
    if user is None:
        return json_response({"error": "User not found"}, HTTPStatus.NOT_FOUND)
    return ok(user)


def create_user(request, proceed):
    return created({"id": 4, "name": "New User"}, location="/api/users/4")


def require_admin(request, proceed):
    if request.get_header("Authorization") != f"Bearer {ADMIN_TOKEN}":
        return unauthorized("Admin token required")
    return proceed()


def admin_stats(request, proceed):
    return ok({"users": len(USERS)})


def timing_header(request, proceed):
    response = proceed()
    return response.set_header("X-Served-By", "rota-example")


def not_found_page(request, proceed):
    return (ResponseBuilder()
        .status(HTTPStatus.NOT_FOUND)
        .html(f"<h1>404 - Page Not Found</h1><p>No page at <code>{request.path}</code>.</p>")
        .build())


class PostsController(Controller):
    """index, show and create only; the other four actions are skipped."""

    def index(self, request):
        return ok({"posts": [{"id": 1, "title": "Hello World"}]})

    def show(self, request):
        post_id = request.params["id"]
        return ok({"id": post_id, "title": f"Post {post_id}"})

    def create(self, request):
        return created({"id": "new", "title": "New Post"})


# =============================================================================
# ROUTER
# =============================================================================

def create_router(config=None):
    """Application factory; `router` below is the default instance."""
    router = Router(config or RouterConfig.from_env())

    router.use(router.access_logger(), ErrorHandlerMiddleware(), timing_header)

    (router
        .get("/", home)
        .get("/hello", hello)
        .get("/hello/:name", hello_name)
        .get("/files/*path", show_file))

    def api(group):
        group.use(CORSMiddleware())
        group.get("/users", list_users)
        group.get("/users/:id", get_user)
        group.post("/users", create_user)
        group.options("/*", lambda request, proceed: proceed())
        group.group("/admin", lambda admin: admin.use(require_admin).get("/stats", admin_stats))

    router.group("/api", api)
    router.resources("posts", PostsController())

    # Registered last: first-match means it only catches what nothing else did
    router.any("*", not_found_page)

    return router


router = create_router()
