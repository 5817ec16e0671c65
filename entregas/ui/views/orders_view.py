"""Orders View.

One list page per order status (pending, accepted, delivered, all).
Orders are fetched on a background thread, narrowed with
``filter_orders_for_user`` for the current profile, and shown as rows
with an optional action that moves an order to its next status.

**Thin UI Rule**: visibility rules live in ``order_filter``; this view
only fetches, filters and displays.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import Optional

import customtkinter as ctk

from entregas.exceptions import RepositoryError
from entregas.logger import StructuredLogger
from entregas.models.enums import OrderStatus
from entregas.models.order import Order
from entregas.repositories.order_repository import OrderRepository
from entregas.services.access_guard import ProfileSource
from entregas.services.order_filter import filter_orders_for_user
from entregas.ui.theme import (
    ACCENT_HOVER,
    ACCENT_PRIMARY,
    CONTENT_BG,
    CONTENT_CARD_BG,
    CORNER_RADIUS,
    ERROR_TEXT,
    FONT_BODY,
    FONT_BUTTON,
    FONT_HEADING,
    FONT_SMALL,
    PADDING_LG,
    PADDING_MD,
    PADDING_SM,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

_REFRESH_INTERVAL_MS: int = 30_000


class OrdersView(ctk.CTkFrame):
    """List of the orders in *statuses* the current user may see.

    Parameters
    ----------
    parent:
        Content container provided by the route guard.
    title:
        Page heading.
    statuses:
        ``status_transporte`` values listed on this page.
    order_repo:
        Order data access.
    source:
        Profile source; read at filter time, never cached.
    logger:
        Structured logger instance.
    action_label:
        Text of the per-row action button, if the page has one.
    next_status:
        Status the action moves an order to.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        title: str,
        statuses: Sequence[OrderStatus],
        order_repo: OrderRepository,
        source: ProfileSource,
        logger: StructuredLogger,
        action_label: Optional[str] = None,
        next_status: Optional[OrderStatus] = None,
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)
        self._title = title
        self._statuses = tuple(statuses)
        self._order_repo = order_repo
        self._source = source
        self._logger = logger
        self._action_label = action_label
        self._next_status = next_status
        self._refresh_job: Optional[str] = None

        self._build_ui()
        self._load()

    # ------------------------------------------------------------------
    # Widget creation
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        header = ctk.CTkFrame(self, fg_color="transparent")
        header.pack(fill="x", padx=PADDING_LG, pady=(PADDING_LG, PADDING_SM))

        ctk.CTkLabel(
            header,
            text=self._title,
            font=FONT_HEADING,
            text_color=TEXT_PRIMARY,
            anchor="w",
        ).pack(side="left")

        ctk.CTkButton(
            header,
            text="Atualizar",
            font=FONT_BUTTON,
            width=110,
            fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER,
            command=self._load,
        ).pack(side="right")

        self._status_label = ctk.CTkLabel(
            self,
            text="Carregando pedidos...",
            font=FONT_SMALL,
            text_color=TEXT_SECONDARY,
            anchor="w",
        )
        self._status_label.pack(fill="x", padx=PADDING_LG)

        self._list_frame = ctk.CTkScrollableFrame(self, fg_color="transparent")
        self._list_frame.pack(fill="both", expand=True, padx=PADDING_LG, pady=PADDING_MD)

    def _render(self, orders: Sequence[Order]) -> None:
        for child in self._list_frame.winfo_children():
            child.destroy()

        if not orders:
            self._status_label.configure(
                text="Nenhum pedido encontrado.", text_color=TEXT_SECONDARY,
            )
            return

        self._status_label.configure(
            text=f"{len(orders)} pedido(s)", text_color=TEXT_SECONDARY,
        )
        for order in orders:
            self._build_row(order)

    def _build_row(self, order: Order) -> None:
        row = ctk.CTkFrame(
            self._list_frame,
            fg_color=CONTENT_CARD_BG,
            corner_radius=CORNER_RADIUS,
        )
        row.pack(fill="x", pady=(0, PADDING_SM))

        when = order.data.strftime("%d/%m/%Y %H:%M") if order.data else "-"
        summary = f"#{order.id}  •  {order.nome_cliente or 'Cliente'}"
        ctk.CTkLabel(
            row,
            text=summary,
            font=FONT_BODY,
            text_color=TEXT_PRIMARY,
            anchor="w",
        ).pack(side="left", padx=PADDING_MD, pady=PADDING_SM)
        ctk.CTkLabel(
            row,
            text=f"{order.loja_nome or order.id_loja}  •  {when}  •  {order.status_transporte}",
            font=FONT_SMALL,
            text_color=TEXT_SECONDARY,
            anchor="w",
        ).pack(side="left", padx=PADDING_SM)

        if self._action_label and self._next_status is not None:
            ctk.CTkButton(
                row,
                text=self._action_label,
                font=FONT_SMALL,
                width=120,
                fg_color=ACCENT_PRIMARY,
                hover_color=ACCENT_HOVER,
                command=lambda order_id=order.id: self._advance(order_id),
            ).pack(side="right", padx=PADDING_MD, pady=PADDING_SM)

    # ------------------------------------------------------------------
    # Data loading
    # ------------------------------------------------------------------

    def _load(self) -> None:
        if self._refresh_job is not None:
            self.after_cancel(self._refresh_job)
            self._refresh_job = None
        threading.Thread(target=self._fetch, daemon=True).start()

    def _fetch(self) -> None:
        """Background thread: fetch, filter, hand back to the main loop."""
        try:
            orders = self._order_repo.list_by_status(self._statuses)
        except RepositoryError as exc:
            message = f"Erro ao carregar pedidos: {exc}"
            self.after(0, lambda: self._show_error(message))
            return

        profile = self._source.profile
        visible = filter_orders_for_user(orders, profile.user_role, profile.user_lojas)
        self.after(0, lambda: self._on_loaded(visible))

    def _on_loaded(self, orders: Sequence[Order]) -> None:
        if not self.winfo_exists():
            return
        self._render(orders)
        self._refresh_job = self.after(_REFRESH_INTERVAL_MS, self._load)

    def _advance(self, order_id: object) -> None:
        next_status = self._next_status

        def _update() -> None:
            try:
                self._order_repo.update_status(order_id, next_status)
            except RepositoryError as exc:
                message = f"Erro ao atualizar pedido: {exc}"
                self.after(0, lambda: self._show_error(message))
                return
            self.after(0, self._load)

        threading.Thread(target=_update, daemon=True).start()

    def _show_error(self, message: str) -> None:
        if self.winfo_exists():
            self._status_label.configure(
                text=message, text_color=ERROR_TEXT,
            )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def destroy(self) -> None:
        """Cancel the pending refresh timer before destroying the widget."""
        if self._refresh_job is not None:
            self.after_cancel(self._refresh_job)
            self._refresh_job = None
        super().destroy()
