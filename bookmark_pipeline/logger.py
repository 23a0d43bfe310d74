"""Colored console logger shared by every pipeline stage."""

import os
from datetime import datetime


class Logger:
    """Simple colored logging"""
    COLORS = {
        'RED': '\033[91m',
        'GREEN': '\033[92m',
        'YELLOW': '\033[93m',
        'BLUE': '\033[94m',
        'MAGENTA': '\033[95m',
        'CYAN': '\033[96m',
        'RESET': '\033[0m',
        'BOLD': '\033[1m',
    }

    @classmethod
    def _log(cls, color: str, prefix: str, msg: str):
        timestamp = datetime.now().strftime('%H:%M:%S')
        print(f"{cls.COLORS[color]}[{timestamp}] {prefix}{cls.COLORS['RESET']} {msg}")

    @classmethod
    def info(cls, msg): cls._log('BLUE', 'INFO', msg)
    @classmethod
    def success(cls, msg): cls._log('GREEN', 'OK', msg)
    @classmethod
    def warning(cls, msg): cls._log('YELLOW', 'WARN', msg)
    @classmethod
    def error(cls, msg): cls._log('RED', 'ERROR', msg)
    @classmethod
    def debug(cls, msg):
        if os.getenv('DEBUG'):
            cls._log('MAGENTA', 'DEBUG', msg)

    @staticmethod
    def banner(title: str):
        print("\n" + "=" * 60)
        print(title)
        print("=" * 60)
