from django.dispatch import Signal

# Sent once translations have been applied, from the server or from the cache.
# Sender is the loader class; no arguments.
translations_loaded = Signal()
