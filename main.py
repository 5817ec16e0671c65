"""
EntregasWoo Desktop Dashboard Entry Point.

Bootstraps the dependency graph via constructor injection, registers the
dashboard pages and launches the CustomTkinter GUI.  Every subsystem is
wired here; there are no module-level globals.

Usage::

    python main.py
"""

from __future__ import annotations

import atexit
import sys
import traceback

from entregas.config import get_config
from entregas.database import DatabaseManager
from entregas.logger import StructuredLogger, get_logger
from entregas.models.enums import OrderStatus, Role
from entregas.navigation import PageRegistry
from entregas.services import create_services
from entregas.ui.app_shell import AppShell
from entregas.ui.views.orders_view import OrdersView
from entregas.ui.views.placeholder_view import PlaceholderView
from entregas.ui.views.profile_view import ProfileView

_STAFF = frozenset({Role.ENTREGADOR, Role.GERENTE, Role.ADMIN})
_MANAGEMENT = frozenset({Role.GERENTE, Role.ADMIN})


def main() -> None:
    """Application entry point: wire dependencies and launch the GUI."""
    logger: StructuredLogger = get_logger("main")
    logger.info("Starting EntregasWoo...")

    # ------------------------------------------------------------------
    # 1. Configuration (from .env / environment variables)
    # ------------------------------------------------------------------
    config = get_config()

    # ------------------------------------------------------------------
    # 2. Database Manager (Supabase client; offline when unconfigured)
    # ------------------------------------------------------------------
    db = DatabaseManager(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        logger=StructuredLogger(name="database"),
    )
    atexit.register(db.close)

    # ------------------------------------------------------------------
    # 3. Service Container (repositories + resolver)
    # ------------------------------------------------------------------
    services = create_services(db=db, config=config)
    resolver = services["role_resolver"]
    orders = services["order_repository"]

    # ------------------------------------------------------------------
    # 4. Page Registry
    # ------------------------------------------------------------------
    registry = PageRegistry(logger=get_logger("pages"))

    registry.register(
        route="/",
        display_name="EntregasWoo",
        icon="⌂",  # House
        factory=lambda parent: PlaceholderView(
            parent, "EntregasWoo", "Gestão de entregas das lojas WooCommerce.",
        ),
        public=True,
    )
    registry.register(
        route="/vendaswoo",
        display_name="VendasWoo",
        icon="\U0001F6D2",  # Cart
        factory=lambda parent: PlaceholderView(parent, "VendasWoo"),
        public=True,
    )
    registry.register(
        route="/perfil",
        display_name="Meu Perfil",
        icon="\U0001F464",  # Bust
        factory=lambda parent: ProfileView(
            parent, resolver=resolver, logger=get_logger("profile"),
        ),
    )
    registry.register(
        route="/pedidos-pendentes",
        display_name="Pedidos Pendentes",
        icon="⏳",  # Hourglass
        factory=lambda parent: OrdersView(
            parent,
            title="Pedidos Pendentes",
            statuses=[OrderStatus.PENDENTE],
            order_repo=orders,
            source=resolver,
            logger=get_logger("orders"),
            action_label="Aceitar",
            next_status=OrderStatus.ACEITO,
        ),
        required_role=Role.ENTREGADOR,
        menu_roles=_STAFF,
    )
    registry.register(
        route="/pedidos-aceitos",
        display_name="Pedidos Aceitos",
        icon="✔",  # Check
        factory=lambda parent: OrdersView(
            parent,
            title="Pedidos Aceitos",
            statuses=[OrderStatus.ACEITO, OrderStatus.EM_ROTA],
            order_repo=orders,
            source=resolver,
            logger=get_logger("orders"),
            action_label="Entregue",
            next_status=OrderStatus.ENTREGUE,
        ),
        required_role=Role.ENTREGADOR,
        menu_roles=frozenset({Role.ENTREGADOR}),
    )
    registry.register(
        route="/pedidos-entregues",
        display_name="Pedidos Entregues",
        icon="\U0001F4E6",  # Package
        factory=lambda parent: OrdersView(
            parent,
            title="Pedidos Entregues",
            statuses=[OrderStatus.ENTREGUE],
            order_repo=orders,
            source=resolver,
            logger=get_logger("orders"),
        ),
        required_role=Role.ENTREGADOR,
        menu_roles=_STAFF,
    )
    registry.register(
        route="/relatorios",
        display_name="Relatórios",
        icon="\U0001F4CA",  # Bar chart
        factory=lambda parent: PlaceholderView(parent, "Relatórios"),
        required_role=Role.ENTREGADOR,
        menu_roles=frozenset({Role.ADMIN}),
        show_with_memberships=True,
    )
    registry.register(
        route="/gestao-entregadores",
        display_name="Gestão de Entregadores",
        icon="\U0001F465",  # Busts
        factory=lambda parent: PlaceholderView(parent, "Gestão de Entregadores"),
        required_role=Role.GERENTE,
        menu_roles=_MANAGEMENT,
    )
    registry.register(
        route="/todos-pedidos",
        display_name="Todos os Pedidos",
        icon="\U0001F4CB",  # Clipboard
        factory=lambda parent: OrdersView(
            parent,
            title="Todos os Pedidos",
            statuses=list(OrderStatus),
            order_repo=orders,
            source=resolver,
            logger=get_logger("orders"),
        ),
        required_role=Role.GERENTE,
        menu_roles=_MANAGEMENT,
    )
    registry.register(
        route="/admin",
        display_name="Administração",
        icon="⚙",  # Gear
        factory=lambda parent: PlaceholderView(parent, "Administração"),
        required_role=Role.ADMIN,
        menu_roles=frozenset({Role.ADMIN}),
    )

    # ------------------------------------------------------------------
    # 5. Launch the GUI (blocks until window closes)
    # ------------------------------------------------------------------
    logger.info("Launching GUI...")
    app = AppShell(
        config=config,
        services=services,
        registry=registry,
        logger=get_logger("ui"),
    )
    try:
        app.mainloop()
    finally:
        db.close()
        logger.info("EntregasWoo shut down.")


def _show_fatal_error(exc: BaseException) -> None:
    """Display a fatal-error dialog so double-click users get feedback.

    Uses ``tkinter.messagebox`` rather than CustomTkinter so the dialog
    works even when CTk initialisation itself is what failed.
    """
    detail = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    try:
        import tkinter
        from tkinter import messagebox

        root = tkinter.Tk()
        root.withdraw()
        messagebox.showerror(
            title="EntregasWoo - Erro Fatal",
            message=(
                "O aplicativo encontrou um erro inesperado e não pode "
                "continuar.\n\n"
                f"{type(exc).__name__}: {exc}"
            ),
            detail=detail,
        )
        root.destroy()
    except Exception:
        # Headless or missing Tcl/Tk: fall back to stderr.
        sys.stderr.write(f"FATAL: {type(exc).__name__}: {exc}\n{detail}")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        _show_fatal_error(exc)
        sys.exit(1)
