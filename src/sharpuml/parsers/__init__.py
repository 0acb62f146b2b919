"""C# source parsing."""

from .csharp_parser import CSharpParser, extract_classes, initialize_frontend

__all__ = ["CSharpParser", "extract_classes", "initialize_frontend"]
