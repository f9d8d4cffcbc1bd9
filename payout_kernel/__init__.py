"""
Payout Kernel

Pure value types and policy shapes for transactional payout handlers:
- Multi-denomination coin sets with a fixed integer range
- Validated identities behind an external validator capability
- Authorization policies (nobody / one / many / anyone)
- Typed, code-carrying exceptions
- Structured JSON logging
"""

__version__ = "0.1.0"
