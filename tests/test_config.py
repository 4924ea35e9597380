"""
Tests for environment-driven configuration.
"""

import logging

from sudokugame.cache import DEFAULT_MAX_SIZE
from sudokugame.config import resolve_cache_size, resolve_difficulty, resolve_log_level


def test_difficulty_default(monkeypatch):
    monkeypatch.delenv("SUDOKU_DIFFICULTY", raising=False)
    assert resolve_difficulty() == "medium"


def test_difficulty_from_env(monkeypatch):
    monkeypatch.setenv("SUDOKU_DIFFICULTY", " Hard ")
    assert resolve_difficulty() == "hard"


def test_bad_difficulty_falls_back(monkeypatch, caplog):
    monkeypatch.setenv("SUDOKU_DIFFICULTY", "expert")
    with caplog.at_level(logging.WARNING):
        assert resolve_difficulty() == "medium"
    assert "SUDOKU_DIFFICULTY" in caplog.text


def test_log_level(monkeypatch):
    monkeypatch.delenv("SUDOKU_LOG_LEVEL", raising=False)
    assert resolve_log_level() == logging.INFO

    monkeypatch.setenv("SUDOKU_LOG_LEVEL", "debug")
    assert resolve_log_level() == logging.DEBUG

    monkeypatch.setenv("SUDOKU_LOG_LEVEL", "chatty")
    assert resolve_log_level() == logging.INFO


def test_cache_size(monkeypatch):
    monkeypatch.delenv("SUDOKU_CACHE_SIZE", raising=False)
    assert resolve_cache_size() == DEFAULT_MAX_SIZE

    monkeypatch.setenv("SUDOKU_CACHE_SIZE", "250")
    assert resolve_cache_size() == 250

    monkeypatch.setenv("SUDOKU_CACHE_SIZE", "-5")
    assert resolve_cache_size() == 0

    monkeypatch.setenv("SUDOKU_CACHE_SIZE", "lots")
    assert resolve_cache_size() == DEFAULT_MAX_SIZE
