"""CLIユーティリティ"""
