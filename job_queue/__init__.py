"""
Webhook dispatch queue — throttles delivery to two webhooks per two seconds.
"""
