"""
Unit Tests for Client Manager
==============================
"""

import pytest
from clients.llm import OpenAIClient, QwenClient
from services.client_manager import ClientManager


class TestClientManager:
    """Test suite for ClientManager."""

    @pytest.fixture
    def manager(self):
        manager = ClientManager()
        yield manager
        manager.cleanup()

    def test_initialization(self, manager):
        """Test client manager initialization."""
        assert not manager.is_initialized()
        manager.initialize()
        assert manager.is_initialized()

    def test_initialize_twice_keeps_clients(self, manager):
        manager.initialize()
        client = manager.get_client('qwen')
        manager.initialize()
        assert manager.get_client('qwen') is client

    def test_get_client(self, manager):
        """Test getting client by model name."""
        manager.initialize()

        assert isinstance(manager.get_client('qwen'), QwenClient)
        assert isinstance(manager.get_client('openai'), OpenAIClient)

    def test_get_client_before_initialize_raises(self, manager):
        with pytest.raises(RuntimeError):
            manager.get_client('qwen')

    def test_get_invalid_client_raises_error(self, manager):
        """Test that invalid model raises ValueError."""
        manager.initialize()

        with pytest.raises(ValueError):
            manager.get_client('invalid_model')

    def test_get_available_models(self, manager):
        """Test getting list of available models."""
        manager.initialize()

        models = manager.get_available_models()
        assert isinstance(models, list)
        assert 'qwen' in models
        assert 'openai' in models

    def test_register_client(self, manager):
        """A registered client is served without initialize()."""
        fake = object()
        manager.register_client('fake', fake)

        assert manager.is_initialized()
        assert manager.get_client('fake') is fake

    def test_cleanup(self, manager):
        manager.initialize()
        manager.cleanup()

        assert not manager.is_initialized()
        assert manager.get_available_models() == []
