"""
Async HTTP adapter for API interaction.

This library provides:
- An httpx-backed client with uniform request error mapping
- Cooperative cancellation distinguished from transport timeouts
- Logging and configuration helpers
"""

__version__ = "1.0.0"
__author__ = "BPT Team"
