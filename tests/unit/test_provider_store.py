"""Unit tests for decayclock.utils.key_codec and decayclock.io.provider_store.

Covers:
- Key obfuscation round trip and key mismatch detection
- Provider YAML CRUD: save, list, load by id, remove
- Enabled-only loading in priority order with decrypted keys
- Environment fallback when the file is missing, broken or empty
"""

from __future__ import annotations

import pytest
import yaml

from config.defaults import FALLBACK_PROVIDER_ID
from decayclock.io.provider_store import (
    fallback_providers,
    list_provider_records,
    load_provider_by_id,
    load_provider_configs,
    remove_provider_record,
    save_provider_record,
)
from decayclock.utils.key_codec import (
    EnvKeyProvider,
    StaticKeyProvider,
    decrypt_api_key,
    encrypt_api_key,
)


@pytest.fixture
def key_provider():
    return StaticKeyProvider("unit-test-key")


@pytest.fixture
def providers_file(tmp_path):
    return tmp_path / "providers.yaml"


# ── Key codec ────────────────────────────────────────────────────────────────────

class TestKeyCodec:
    def test_round_trip(self, key_provider):
        encrypted = encrypt_api_key("sk-live-123", key_provider)
        assert encrypted != "sk-live-123"
        assert decrypt_api_key(encrypted, key_provider) == "sk-live-123"

    def test_invalid_base64_raises(self, key_provider):
        with pytest.raises(ValueError, match="base64"):
            decrypt_api_key("not base64!!", key_provider)

    def test_empty_static_key_rejected(self):
        with pytest.raises(ValueError):
            StaticKeyProvider("")

    def test_env_key_provider_reads_variable(self, monkeypatch):
        monkeypatch.setenv("TEST_DECAYCLOCK_KEY", "from-env")
        assert EnvKeyProvider("TEST_DECAYCLOCK_KEY").get_key() == b"from-env"

    def test_env_key_provider_default(self, monkeypatch):
        monkeypatch.delenv("TEST_DECAYCLOCK_KEY", raising=False)
        assert EnvKeyProvider("TEST_DECAYCLOCK_KEY", default="dflt").get_key() == b"dflt"


# ── Store CRUD ───────────────────────────────────────────────────────────────────

class TestProviderStore:
    def test_saved_key_is_not_plaintext(self, providers_file, key_provider, make_provider_config):
        """The providers file must never contain the raw API key."""
        save_provider_record(make_provider_config(api_key="sk-very-secret"), providers_file, key_provider)
        text = providers_file.read_text(encoding="utf-8")
        assert "sk-very-secret" not in text
        assert "api_key_encrypted" in text

    def test_load_decrypts_and_sorts_by_priority(
        self, providers_file, key_provider, make_provider_config
    ):
        save_provider_record(
            make_provider_config("slow", priority=3, api_key="k3"), providers_file, key_provider
        )
        save_provider_record(
            make_provider_config("fast", priority=1, api_key="k1"), providers_file, key_provider
        )
        configs = load_provider_configs(providers_file, key_provider)
        assert [c.id for c in configs] == ["fast", "slow"]
        assert [c.api_key for c in configs] == ["k1", "k3"]

    def test_disabled_providers_are_skipped(
        self, providers_file, key_provider, make_provider_config
    ):
        save_provider_record(make_provider_config("on"), providers_file, key_provider)
        save_provider_record(make_provider_config("off", enabled=False), providers_file, key_provider)
        assert [c.id for c in load_provider_configs(providers_file, key_provider)] == ["on"]

    @pytest.mark.parametrize("flag,loaded", [("false", False), ("No", False), ("true", True), ("on", True)])
    def test_quoted_enabled_flags(self, providers_file, key_provider, flag, loaded):
        """A quoted "false" in hand-edited YAML must still disable the provider."""
        providers_file.write_text(
            "providers:\n"
            "  - id: quoted\n"
            "    name: Quoted\n"
            f"    enabled: \"{flag}\"\n",
            encoding="utf-8",
        )
        ids = [c.id for c in load_provider_configs(providers_file, key_provider)]
        assert ids == (["quoted"] if loaded else [])

    def test_unrecognised_enabled_flag_skips_record(self, providers_file, key_provider):
        providers_file.write_text(
            "providers:\n"
            "  - id: odd\n"
            "    enabled: maybe\n"
            "  - id: fine\n",
            encoding="utf-8",
        )
        assert [c.id for c in load_provider_configs(providers_file, key_provider)] == ["fine"]
        assert [r.id for r in list_provider_records(providers_file)] == ["fine"]

    def test_list_includes_disabled_without_keys(
        self, providers_file, key_provider, make_provider_config
    ):
        save_provider_record(make_provider_config("off", enabled=False), providers_file, key_provider)
        records = list_provider_records(providers_file)
        assert [r.id for r in records] == ["off"]
        assert records[0].api_key == ""

    def test_save_replaces_existing_record(
        self, providers_file, key_provider, make_provider_config
    ):
        save_provider_record(make_provider_config("p", model="old"), providers_file, key_provider)
        save_provider_record(make_provider_config("p", model="new"), providers_file, key_provider)
        records = list_provider_records(providers_file)
        assert len(records) == 1
        assert records[0].model == "new"

    def test_load_by_id(self, providers_file, key_provider, make_provider_config):
        save_provider_record(make_provider_config("p", enabled=False, api_key="k"), providers_file, key_provider)
        config = load_provider_by_id("p", providers_file, key_provider)
        assert config is not None
        assert config.api_key == "k"
        assert load_provider_by_id("missing", providers_file, key_provider) is None

    def test_remove(self, providers_file, key_provider, make_provider_config):
        save_provider_record(make_provider_config("p"), providers_file, key_provider)
        assert remove_provider_record("p", providers_file) is True
        assert remove_provider_record("p", providers_file) is False
        assert list_provider_records(providers_file) == []

    def test_wrong_key_never_yields_original(self, providers_file, key_provider, make_provider_config):
        """Decrypting with a different key never recovers the stored credential."""
        save_provider_record(make_provider_config("p", api_key="sk-ü"), providers_file, key_provider)
        other = StaticKeyProvider("ÿ")
        configs = load_provider_configs(providers_file, other)
        assert all(c.api_key != "sk-ü" for c in configs)


# ── Fallback ─────────────────────────────────────────────────────────────────────

class TestFallback:
    def test_no_key_no_fallback(self):
        assert fallback_providers(None) == []
        assert fallback_providers("") == []

    def test_missing_file_uses_fallback(self, providers_file, key_provider):
        configs = load_provider_configs(providers_file, key_provider, fallback_api_key="sk-env")
        assert [c.id for c in configs] == [FALLBACK_PROVIDER_ID]
        assert configs[0].api_key == "sk-env"

    def test_broken_yaml_uses_fallback(self, providers_file, key_provider):
        providers_file.write_text("providers: [unclosed", encoding="utf-8")
        configs = load_provider_configs(providers_file, key_provider, fallback_api_key="sk-env")
        assert [c.id for c in configs] == [FALLBACK_PROVIDER_ID]

    def test_wrong_shape_uses_fallback(self, providers_file, key_provider):
        providers_file.write_text(yaml.safe_dump({"other": 1}), encoding="utf-8")
        assert load_provider_configs(providers_file, key_provider) == []

    def test_all_disabled_uses_fallback(
        self, providers_file, key_provider, make_provider_config
    ):
        save_provider_record(make_provider_config("off", enabled=False), providers_file, key_provider)
        configs = load_provider_configs(providers_file, key_provider, fallback_api_key="sk-env")
        assert [c.id for c in configs] == [FALLBACK_PROVIDER_ID]

    def test_fallback_by_id(self, providers_file, key_provider):
        config = load_provider_by_id(
            FALLBACK_PROVIDER_ID, providers_file, key_provider, fallback_api_key="sk-env"
        )
        assert config is not None and config.api_key == "sk-env"
