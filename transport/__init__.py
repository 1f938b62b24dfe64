"""Transport layers between the chat account and HTTP."""
