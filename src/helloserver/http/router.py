"""
=============================================================================
URL ROUTER
=============================================================================

Maps request paths to handler functions by EXACT string comparison.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ROUTING FLOW                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Incoming Request                                                   │
    │   GET /api                                                           │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  ROUTER                                                      │   │
    │   │  ┌────────────────────────────────────────────────────────┐ │   │
    │   │  │ ANY  /       → hello_handler                           │ │   │
    │   │  │ ANY  /api    → api_handler        ← MATCH!             │ │   │
    │   │  └────────────────────────────────────────────────────────┘ │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   api_handler(request)                                               │
    │                                                                      │
    │   Anything else (/favicon.ico, /api/, /api/v2) → not_found()         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
MATCHING RULES
=============================================================================

    Pattern: /api
    Matches: /api, /api?x=1 (the query string is not part of the path)
    Doesn't match: /api/, /API, /api/v1

There is no trailing-slash normalization, no :param segments and no
wildcards. A route registered without a method accepts every method.

=============================================================================
INTERVIEW QUESTIONS ABOUT ROUTING
=============================================================================

Q: "What's the time complexity of route matching here?"
A: "O(R) string comparisons for R routes. With two routes a dict lookup
   would be no faster in practice, and a list keeps registration order,
   which is what decides first-match-wins when method filters overlap."

Q: "Why not fall back to / for unknown paths?"
A: "A catch-all root would hide typos and broken links behind a 200.
   Unknown paths get a 404 so clients can tell they missed."

=============================================================================
"""

from dataclasses import dataclass
from typing import Callable, Optional, Dict, List

from .request import HTTPRequest
from .response import HTTPResponse, not_found


# Handler: A function that takes a request and returns a response
Handler = Callable[[HTTPRequest], HTTPResponse]


@dataclass
class Route:
    """
    Represents a registered route.

        Route(
            path="/api",             # Exact path
            method=None,             # HTTP method filter (None = any)
            handler=api_handler,     # Handler function
            name="api",              # Optional name for listings
        )
    """

    path: str
    method: Optional[str]
    handler: Handler
    name: Optional[str] = None

    def accepts(self, method: str) -> bool:
        """True if this route's method filter lets ``method`` through."""
        return self.method is None or self.method == method.upper()


@dataclass
class RouteMatch:
    """Result of a successful route match."""
    route: Route


class Router:
    """
    HTTP request router with exact path matching.

    ==========================================================================
    USAGE
    ==========================================================================

    Explicit registration:

        router = Router()
        router.add_route("/", hello_handler, name="hello")
        router.add_route("/api", api_handler, name="api")

    Decorator form:

        @router.route("/api")
        def api_handler(request):
            ...

    Routes are registered once, before the server starts accepting
    connections. After that the table is only read, so worker threads
    can share it without locking.

    ==========================================================================
    """

    def __init__(self):
        self._routes: List[Route] = []
        self._named_routes: Dict[str, Route] = {}

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        path: str,
        handler: Handler,
        method: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Route:
        """
        Register a route.

        Args:
            path: Exact URL path (e.g., /api)
            handler: Handler function that takes request, returns response
            method: HTTP method (None for any method)
            name: Optional route name

        Returns:
            The registered Route object
        """
        route = Route(
            path=path,
            method=method.upper() if method else None,
            handler=handler,
            name=name,
        )
        self._routes.append(route)

        if name:
            self._named_routes[name] = route

        return route

    def route(
        self,
        path: str,
        method: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Callable[[Handler], Handler]:
        """
        Decorator for registering routes.

        Usage:
            @router.route("/api")
            def api_handler(request):
                ...
        """
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method, name)
            return handler
        return decorator

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first registered route for ``path`` accepting ``method``.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: Request path without query string

        Returns:
            RouteMatch if found, None otherwise
        """
        for route in self._routes:
            if route.path == path and route.accepts(method):
                return RouteMatch(route=route)
        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request to the appropriate handler.

        Unmatched requests get the default 404 text response.
        Handler exceptions propagate to the server, which turns them
        into a 500.
        """
        match = self.match(request.method, request.path)
        if match:
            return match.route.handler(request)
        return not_found()

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def get_route(self, name: str) -> Optional[Route]:
        """Look up a route by the name it was registered with."""
        return self._named_routes.get(name)

    def routes(self) -> List[Route]:
        """Get all registered routes in registration order."""
        return list(self._routes)

    def print_routes(self) -> None:
        """
        Print all registered routes.

        Example output:
            Registered Routes:
            ------------------------------------------------------------
              ANY      /
              ANY      /api
            ------------------------------------------------------------
        """
        print("\nRegistered Routes:")
        print("-" * 60)
        for route in self.routes():
            method = route.method or "ANY"
            print(f"  {method:8} {route.path}")
        print("-" * 60)
