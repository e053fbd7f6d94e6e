"""
Account configuration.
"""
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

DEFAULT_FEE_RATE = 0.0004  # 0.04% of notional per fill


@dataclass
class AccountConfig:
    """
    Parameters for a simulated margin account.
    """

    initial_balance: float = 10000.0
    fee_rate: float = DEFAULT_FEE_RATE
    is_cross_margin: bool = True  # Default tag for new positions, display only
    quantity_precision: int = 4   # Decimals used by format_quantity
    trade_log_maxlen: Optional[int] = None  # Keep only the latest fills when set

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.initial_balance <= 0:
            raise ValueError("initial_balance must be positive")
        if not 0 <= self.fee_rate < 1:
            raise ValueError("fee_rate must be in [0, 1)")
        if self.quantity_precision < 0:
            raise ValueError("quantity_precision must be non-negative")
        if self.trade_log_maxlen is not None and self.trade_log_maxlen <= 0:
            raise ValueError("trade_log_maxlen must be positive")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccountConfig":
        """Create config from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
