# snippet_autocompleter/utils/__init__.py
# logging, config and settings persistence helpers
