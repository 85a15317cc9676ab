"""Abstract database interface.

The store hands records (plain dicts) to the domain layer, which parses them
into entities and reports the ones it cannot use. Ids are opaque strings.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Optional

Record = dict[str, Any]


class Database(ABC):
    """Abstract database interface for catorcena."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Movement operations
    @abstractmethod
    def create_movement(self, record: Record) -> str:
        """Create a general movement. Returns movement ID."""
        pass

    @abstractmethod
    def get_movement(self, movement_id: str) -> Optional[Record]:
        """Get movement record by ID."""
        pass

    @abstractmethod
    def list_movements(self) -> list[Record]:
        """List all movement records in insertion order."""
        pass

    @abstractmethod
    def update_movement(self, movement_id: str, record: Record) -> None:
        """Replace the fields of a movement, keeping its ID."""
        pass

    @abstractmethod
    def delete_movement(self, movement_id: str) -> None:
        """Delete a movement."""
        pass

    # Card operations
    @abstractmethod
    def create_card(self, record: Record) -> str:
        """Create a credit card. Returns card ID."""
        pass

    @abstractmethod
    def get_card(self, card_id: str) -> Optional[Record]:
        """Get card record, including its ordered charges, by ID."""
        pass

    @abstractmethod
    def get_card_by_name(self, name: str) -> Optional[Record]:
        """Get card record by name."""
        pass

    @abstractmethod
    def list_cards(self) -> list[Record]:
        """List all card records with their charges."""
        pass

    @abstractmethod
    def delete_card(self, card_id: str) -> None:
        """Delete a card and its charges."""
        pass

    @abstractmethod
    def add_charge(self, card_id: str, record: Record) -> str:
        """Append a charge to a card. Returns charge ID."""
        pass

    @abstractmethod
    def delete_charge(self, card_id: str, charge_id: str) -> None:
        """Delete a charge from a card."""
        pass

    # Debit account operations
    @abstractmethod
    def create_debit_account(self, record: Record) -> str:
        """Create a debit account. Returns account ID."""
        pass

    @abstractmethod
    def get_debit_account(self, account_id: str) -> Optional[Record]:
        """Get debit account record, including its movements, by ID."""
        pass

    @abstractmethod
    def get_debit_account_by_name(self, name: str) -> Optional[Record]:
        """Get debit account record by name."""
        pass

    @abstractmethod
    def list_debit_accounts(self) -> list[Record]:
        """List all debit account records with their movements."""
        pass

    @abstractmethod
    def delete_debit_account(self, account_id: str) -> None:
        """Delete a debit account and its movements."""
        pass

    @abstractmethod
    def add_debit_movement(self, account_id: str, record: Record) -> str:
        """Append a movement to a debit account. Returns movement ID."""
        pass

    @abstractmethod
    def update_debit_movement(self, account_id: str, movement_id: str, record: Record) -> None:
        """Replace the fields of a debit movement, keeping its ID."""
        pass

    @abstractmethod
    def delete_debit_movement(self, account_id: str, movement_id: str) -> None:
        """Delete a debit movement."""
        pass

    @abstractmethod
    def update_last_accrual_date(self, account_id: str, last_accrual_date: Optional[date]) -> None:
        """Set the date yield accrual continues from."""
        pass

    # Paid-mark overlay
    @abstractmethod
    def list_paid_marks(self) -> list[tuple[int, int, str]]:
        """List (year, period_index, item_id) triples marked as paid."""
        pass

    @abstractmethod
    def is_paid(self, year: int, period_index: int, item_id: str) -> bool:
        """Check if an item is marked as paid in a period."""
        pass

    @abstractmethod
    def set_paid(self, year: int, period_index: int, item_id: str, paid: bool) -> None:
        """Create (paid) or delete (unpaid) the mark of an item in a period."""
        pass
