"""Page Registry.

Central registry of the dashboard pages.  The host shell queries it to
build the sidebar menu for the current profile and to find the page
factory and required role when navigating.

Adding a page = one ``register()`` call + one view class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from entregas.logger import StructuredLogger
from entregas.models.enums import Role
from entregas.models.profile import ResolvedProfile

if TYPE_CHECKING:
    import customtkinter as ctk

    PageFactory = Callable[[ctk.CTkFrame], ctk.CTkFrame]

ALL_ROLES: frozenset[Role] = frozenset(Role)


class PageEntry:
    """Metadata for a single registered page.

    Attributes
    ----------
    route:
        Unique path (e.g. ``'/pedidos-aceitos'``).
    display_name:
        Label shown in the sidebar.
    icon:
        Unicode character used as the sidebar icon.
    factory:
        Callable that receives the content container and returns the
        page's root frame.  Only called once the guard authorizes.
    required_role:
        Minimum role the page's ``AccessGuard`` enforces.
    menu_roles:
        Roles that see the page in the sidebar.
    public:
        Shown to everybody, including signed-out visitors.
    show_with_memberships:
        Also shown to anybody holding at least one active membership.
    """

    __slots__ = (
        "route",
        "display_name",
        "icon",
        "factory",
        "required_role",
        "menu_roles",
        "public",
        "show_with_memberships",
    )

    def __init__(
        self,
        route: str,
        display_name: str,
        icon: str,
        factory: "PageFactory",
        required_role: Role,
        menu_roles: frozenset[Role],
        public: bool,
        show_with_memberships: bool,
    ) -> None:
        self.route = route
        self.display_name = display_name
        self.icon = icon
        self.factory = factory
        self.required_role = required_role
        self.menu_roles = menu_roles
        self.public = public
        self.show_with_memberships = show_with_memberships


class PageRegistry:
    """Ordered collection of the dashboard pages.

    Parameters
    ----------
    logger:
        Structured logger for registration events.
    """

    def __init__(self, logger: StructuredLogger) -> None:
        self._entries: dict[str, PageEntry] = {}
        self._logger = logger

    def register(
        self,
        route: str,
        display_name: str,
        icon: str,
        factory: "PageFactory",
        required_role: Role = Role.VISITANTE,
        menu_roles: frozenset[Role] = ALL_ROLES,
        *,
        public: bool = False,
        show_with_memberships: bool = False,
    ) -> None:
        """Register a page; menu order follows registration order."""
        if route in self._entries:
            self._logger.warning("Page '%s' already registered; overwriting.", route)
        self._entries[route] = PageEntry(
            route=route,
            display_name=display_name,
            icon=icon,
            factory=factory,
            required_role=required_role,
            menu_roles=menu_roles,
            public=public,
            show_with_memberships=show_with_memberships,
        )
        self._logger.debug("Page registered: %s (%s)", route, display_name)

    def get_page(self, route: str) -> PageEntry:
        """Return the page registered at *route*.

        Raises
        ------
        KeyError
            If *route* is not registered.
        """
        if route not in self._entries:
            raise KeyError(f"Page '{route}' is not registered.")
        return self._entries[route]

    def menu_for(self, profile: ResolvedProfile) -> list[PageEntry]:
        """Return the sidebar entries for *profile*, in registration order.

        - signed out: public pages only;
        - signed in as ``visitante`` without stores: public pages plus the
          pages every role may open (the profile page);
        - otherwise: the pages whose ``menu_roles`` include the role, plus
          ``show_with_memberships`` pages when the user has stores.
          Public pages are left out.
        """
        entries = list(self._entries.values())
        public = [entry for entry in entries if entry.public]

        if not profile.is_authenticated:
            return public

        if not profile.user_lojas and profile.user_role == Role.VISITANTE:
            return public + [
                entry
                for entry in entries
                if not entry.public and Role.VISITANTE in entry.menu_roles
            ]

        has_stores = bool(profile.user_lojas)
        return [
            entry
            for entry in entries
            if not entry.public
            and (
                profile.user_role in entry.menu_roles
                or (entry.show_with_memberships and has_stores)
            )
        ]
