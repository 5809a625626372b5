"""
Webhook relay: forwards signed storage event notifications to subscribed
webhooks, pruning subscribers whose deliveries keep failing.
"""

__version__ = "0.1.0"
