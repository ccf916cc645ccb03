"""An interactive shell with pipes, redirections, here-documents and local variables."""

__version__ = "0.1.0"
__all__ = ["builtins", "executor", "hashtable", "parser", "path", "shell", "state", "tokenizer"]