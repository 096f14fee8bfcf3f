"""
Promote observations into rule sets.

Orchestrates: pick variant -> resolve target set -> (create set) -> insert.
"""

import logging
from dataclasses import dataclass, field

from sniview.application.ports import RulesApiPort, SetsApiPort
from sniview.core.exceptions import BackendError, InvalidSelectionError
from sniview.core.models import NEW_SET_ID, Notification, SetConfig
from sniview.domain.set_target import SetTargetResolver
from sniview.domain.variants import (
    generate_domain_variants,
    generate_ip_variants,
    strip_port,
)

__all__ = ["PromotionState", "PromoteUseCase", "PromoteDomainUseCase", "PromoteIpUseCase"]

logger = logging.getLogger(__name__)


@dataclass
class PromotionState:
    """State of the promotion dialog."""
    open: bool = False
    target: str = ""
    variants: list[str] = field(default_factory=list)
    selected: str | list[str] = ""

    @property
    def selection(self) -> list[str]:
        if isinstance(self.selected, list):
            return list(self.selected)
        return [self.selected] if self.selected else []


class PromoteUseCase:
    """
    Shared dialog flow for domain and address promotion.

    A failed request leaves the dialog open so the operator can retry or
    cancel; a successful one closes it.
    """

    kind = "item"

    def __init__(
        self,
        rules_api: RulesApiPort,
        sets_api: SetsApiPort | None = None,
        resolver: SetTargetResolver | None = None,
    ):
        self.rules_api = rules_api
        self.sets_api = sets_api
        self.resolver = resolver or SetTargetResolver()
        self.state = PromotionState()
        self.sets: list[SetConfig] = []

    def _variants_for(self, target: str) -> tuple[str, list[str]]:
        raise NotImplementedError

    def _insert(self, selection: list[str], set_id: str) -> None:
        raise NotImplementedError

    def _success_message(self, selection: list[str]) -> str:
        raise NotImplementedError

    def open(self, target: str, sets: list[SetConfig] | None = None) -> PromotionState:
        """
        Open the dialog for one observed value.

        The first (most specific) variant is preselected. The default set is
        preselected when any sets are known.
        """
        if sets is not None:
            self.sets = list(sets)
        target, variants = self._variants_for(target)
        self.state = PromotionState(
            open=True,
            target=target,
            variants=variants,
            selected=variants[0] if variants else target,
        )
        self.resolver.reset(select_default=bool(self.sets))
        return self.state

    def close(self) -> None:
        self.state = PromotionState()
        self.resolver.reset(select_default=False)

    def select_variant(self, variant: str | list[str]) -> None:
        self.state.selected = variant

    def refresh_sets(self) -> list[SetConfig]:
        """Reload the available sets; failures keep the previous list."""
        if self.sets_api is None:
            return self.sets
        try:
            self.sets = self.sets_api.list_sets()
        except BackendError as e:
            logger.error("Failed to fetch sets: %s", e.message)
        return self.sets

    def add(self) -> Notification | None:
        """
        Insert the selected variant(s) into the resolved target set.

        Returns:
            Notification describing the outcome, or None when there is
            nothing selected
        """
        selection = self.state.selection
        if not self.state.open or not selection:
            return None

        try:
            set_id, new_set_name = self.resolver.resolve()
        except InvalidSelectionError as e:
            return Notification(f"Failed to add {self.kind}: {e.message}", "error")

        try:
            if set_id == NEW_SET_ID:
                set_id = self._create_set(new_set_name or "")
            self._insert(selection, set_id)
        except BackendError as e:
            logger.warning("Failed to add %s %s: %s", self.kind, selection, e.message)
            return Notification(f"Failed to add {self.kind}: {e.message}", "error")

        message = self._success_message(selection)
        self.close()
        self.refresh_sets()
        return Notification(message)

    def _create_set(self, name: str) -> str:
        if self.sets_api is None:
            raise BackendError("Creating sets is not supported by this backend")
        created = self.sets_api.create_set(name)
        logger.info("Created set %s (%s)", created.name, created.id)
        # Later retries target the created set, not a second new one
        self.resolver.select(created.id)
        return created.id


class PromoteDomainUseCase(PromoteUseCase):
    """
    Use case: add an observed domain (or one of its suffixes) to a set.

    Example:
        promote = PromoteDomainUseCase(client, client)
        promote.open("a.b.example.com", sets=client.list_sets())
        promote.select_variant("example.com")
        notification = promote.add()
    """

    kind = "domain"

    def _variants_for(self, target: str) -> tuple[str, list[str]]:
        target = target.strip()
        return target, generate_domain_variants(target)

    def _insert(self, selection: list[str], set_id: str) -> None:
        for domain in selection:
            self.rules_api.add_domain(domain, set_id)

    def _success_message(self, selection: list[str]) -> str:
        return f'Successfully added "{", ".join(selection)}"'


class PromoteIpUseCase(PromoteUseCase):
    """
    Use case: add an observed address (or an enclosing prefix) to a set.

    Several prefixes can be selected at once by passing a list to
    ``select_variant``.
    """

    kind = "ip"

    def _variants_for(self, target: str) -> tuple[str, list[str]]:
        address = strip_port(target)
        return address, generate_ip_variants(address)

    def _insert(self, selection: list[str], set_id: str) -> None:
        self.rules_api.add_ips(selection, set_id)

    def _success_message(self, selection: list[str]) -> str:
        return f"IP {', '.join(selection)} added successfully"
