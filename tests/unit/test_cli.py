"""
Tests for CLI argument parsing in rim.cli_parser.

Tests cover:
- Defaults and flag parsing
- YAML config file defaults, precedence and value conversion
- Range validation
- Host list loading from file, flags and stdin
"""

import io

import pytest

from rim.config import CONF_FILE_ENV, DEFAULT_SORT_KEYS
from rim.cli import HELP_MESSAGES
from rim.cli_parser import (
    build_parser,
    load_yaml_config_defaults,
    parse_arguments,
    parse_hosts,
    read_hosts,
    validate_args,
)
from rim.errors import ConfigurationError, ErrorCode
from tests.fixtures import SAMPLE_HOSTS_FILE


@pytest.fixture(autouse=True)
def no_config_env(monkeypatch):
    monkeypatch.delenv(CONF_FILE_ENV, raising=False)


class TestParseArguments:
    """Tests for parse_arguments."""

    def test_defaults(self):
        args = parse_arguments([])
        assert args.user == "root"
        assert args.password is None
        assert args.sort_keys == list(DEFAULT_SORT_KEYS)
        assert args.limit == 0
        assert args.format == "table"
        assert args.ssh_options == ()
        assert args.stream_log_level is None

    def test_short_flags(self):
        args = parse_arguments([
            "-f", "hosts.txt", "-u", "admin", "-p", "secret",
            "-k1", "tx-pps", "-k2", "+rx-eps", "-l", "5", "-n", "-e",
        ])
        assert args.hosts_file == "hosts.txt"
        assert args.user == "admin"
        assert args.password == "secret"
        assert args.sort_keys == ["tx-pps", "+rx-eps"]
        assert args.limit == 5
        assert args.no_head
        assert args.extended

    def test_sort_keys_override_k_flags(self):
        args = parse_arguments(["-k1", "tx-pps", "--sort-keys", "rx-eps", "tx-dps", "rx-pps"])
        assert args.sort_keys == ["rx-eps", "tx-dps", "rx-pps"]

    def test_ssh_options_collected(self):
        args = parse_arguments(["--ssh-option", "Ciphers=aes128-ctr", "--ssh-option", "Compression=yes"])
        assert args.ssh_options == ("Ciphers=aes128-ctr", "Compression=yes")

    def test_version_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_arguments(["-v"])
        assert exc_info.value.code == 0
        assert "1.0.0" in capsys.readouterr().out

    def test_unknown_format_rejected(self):
        with pytest.raises(SystemExit):
            parse_arguments(["--format", "xml"])

    def test_help_messages_cover_sort_keys(self):
        assert "rx-dps" in HELP_MESSAGES['sort_key']


class TestValidateArgs:
    """Tests for range validation."""

    @pytest.mark.parametrize("argv,parameter", [
        (["-l", "-1"], "limit"),
        (["--workers", "0"], "workers"),
        (["--connect-timeout", "0"], "connect-timeout"),
        (["--command-timeout", "0"], "command-timeout"),
    ])
    def test_out_of_range(self, argv, parameter):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_arguments(argv)
        assert exc_info.value.error.context['parameter'] == parameter

    def test_valid_args_pass(self, basic_args):
        validate_args(basic_args)


class TestYamlConfig:
    """Tests for YAML config file defaults."""

    @staticmethod
    def write_config(tmp_path, text):
        config = tmp_path / "rim.yaml"
        config.write_text(text)
        return str(config)

    def test_values_applied(self, tmp_path):
        config = self.write_config(
            tmp_path, "user: monitor\nconnect-timeout: 3\nsort_keys: tx-pps, rx-pps\nlimit: 10\n"
        )
        args = parse_arguments(["--config-file", config])
        assert args.user == "monitor"
        assert args.connect_timeout == 3
        assert args.sort_keys == ["tx-pps", "rx-pps"]
        assert args.limit == 10

    def test_command_line_takes_precedence(self, tmp_path):
        """Options given on the command line win over the config file."""
        config = self.write_config(tmp_path, "user: fromfile\nlimit: 5\nworkers: 3\nformat: csv\n")
        args = parse_arguments(["-c", config, "-u", "fromcli", "-l", "2", "--format", "json"])
        assert args.user == "fromcli"
        assert args.limit == 2
        assert args.format == "json"
        # Not given on the command line, so the file still applies
        assert args.workers == 3

    def test_command_line_list_replaces_file_list(self, tmp_path):
        config = self.write_config(tmp_path, "hosts: [fw1, fw2]\nsort-keys: [tx-pps]\n")
        args = parse_arguments(["-c", config, "--hosts", "fw9", "--sort-keys", "rx-eps"])
        assert args.hosts == ["fw9"]
        assert args.sort_keys == ["rx-eps"]

    def test_config_file_from_environment(self, tmp_path, monkeypatch):
        config = self.write_config(tmp_path, "extended: true\n")
        monkeypatch.setenv(CONF_FILE_ENV, config)
        args = parse_arguments([])
        assert args.extended
        assert args.config_file == config

    def test_environment_file_loses_to_command_line(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONF_FILE_ENV, self.write_config(tmp_path, "user: fromfile\n"))
        assert parse_arguments(["--user", "fromcli"]).user == "fromcli"

    def test_unknown_keys_skipped(self, tmp_path, capturing_logger):
        config = self.write_config(tmp_path, "colour: blue\nuser: ops\nconfig-file: other.yaml\n")
        args = parse_arguments(["-c", config], logger=capturing_logger)
        assert args.user == "ops"
        assert args.config_file == config
        assert not hasattr(args, "colour")
        capturing_logger.assert_logged('warning', "colour")

    def test_null_values_ignored(self, tmp_path):
        config = self.write_config(tmp_path, "user:\n")
        assert load_yaml_config_defaults(build_parser(), config) == {}
        assert parse_arguments(["-c", config]).user == "root"

    def test_empty_file(self, tmp_path, capturing_logger):
        config = self.write_config(tmp_path, "")
        assert load_yaml_config_defaults(build_parser(), config, logger=capturing_logger) == {}
        capturing_logger.assert_logged('warning', "empty")

    def test_missing_file(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_arguments(["--config-file", "/nonexistent/rim.yaml"])
        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_invalid_yaml(self, tmp_path):
        config = self.write_config(tmp_path, "user: [unclosed\n")
        with pytest.raises(ConfigurationError) as exc_info:
            load_yaml_config_defaults(build_parser(), config)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_non_mapping(self, tmp_path):
        config = self.write_config(tmp_path, "- user\n- root\n")
        with pytest.raises(ConfigurationError):
            load_yaml_config_defaults(build_parser(), config)


class TestConfigValueConversion:
    """Config file values are converted like their command line counterparts."""

    @staticmethod
    def defaults_for(tmp_path, text):
        config = tmp_path / "rim.yaml"
        config.write_text(text)
        return load_yaml_config_defaults(build_parser(), str(config))

    def test_numbers_converted(self, tmp_path):
        defaults = self.defaults_for(tmp_path, "limit: '7'\ncommand-timeout: 2\nworkers: 4\n")
        assert defaults == {'limit': 7, 'command_timeout': 2.0, 'workers': 4}

    def test_string_options_stringified(self, tmp_path):
        assert self.defaults_for(tmp_path, "user: 1234\n") == {'user': "1234"}

    def test_list_options(self, tmp_path):
        defaults = self.defaults_for(
            tmp_path, "hosts: fw1, fw2\nssh-option: [Compression=yes]\nsort-keys: [rx-Bps, tx-pps]\n"
        )
        assert defaults['hosts'] == ["fw1", "fw2"]
        assert defaults['ssh_options'] == ["Compression=yes"]
        assert defaults['sort_keys'] == ["rx-Bps", "tx-pps"]

    @pytest.mark.parametrize("text,parameter", [
        ("limit: abc\n", "limit"),
        ("limit: 2.5\n", "limit"),
        ("workers: true\n", "workers"),
        ("connect-timeout: [1, 2]\n", "connect-timeout"),
        ("command-timeout: soon\n", "command-timeout"),
        ("format: xml\n", "format"),
        ("extended: 'yes'\n", "extended"),
        ("hosts: {fw1: 22}\n", "hosts"),
    ])
    def test_invalid_value_rejected(self, tmp_path, text, parameter):
        with pytest.raises(ConfigurationError) as exc_info:
            self.defaults_for(tmp_path, text)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert exc_info.value.error.context["parameter"] == parameter

    def test_invalid_limit_through_parse_arguments(self, tmp_path):
        config = tmp_path / "rim.yaml"
        config.write_text("limit: abc\n")
        with pytest.raises(ConfigurationError) as exc_info:
            parse_arguments(["-c", str(config)])
        assert "limit" in str(exc_info.value)


class TestReadHosts:
    """Tests for host list loading."""

    def test_parse_hosts_skips_comments_and_blanks(self):
        assert parse_hosts(SAMPLE_HOSTS_FILE.splitlines()) == [
            "fw1.example.com", "fw2.example.com:2222", "10.0.0.1",
        ]

    def test_from_file(self, tmp_path, basic_args):
        hosts_file = tmp_path / "hosts"
        hosts_file.write_text(SAMPLE_HOSTS_FILE)
        basic_args.hosts_file = str(hosts_file)
        assert read_hosts(basic_args) == ["fw1.example.com", "fw2.example.com:2222", "10.0.0.1"]

    def test_from_stdin(self, basic_args):
        stdin = io.StringIO("fw1\n\nfw2\n")
        assert read_hosts(basic_args, stdin=stdin) == ["fw1", "fw2"]

    def test_from_flag_does_not_read_stdin(self, basic_args):
        basic_args.hosts = ["fw1", "fw2"]
        stdin = io.StringIO("fw3\n")
        assert read_hosts(basic_args, stdin=stdin) == ["fw1", "fw2"]

    def test_flag_and_file_combined(self, tmp_path, basic_args):
        hosts_file = tmp_path / "hosts"
        hosts_file.write_text("fw2\n")
        basic_args.hosts = ["fw1"]
        basic_args.hosts_file = str(hosts_file)
        assert read_hosts(basic_args) == ["fw1", "fw2"]

    def test_missing_file(self, basic_args):
        basic_args.hosts_file = "/nonexistent/hosts"
        with pytest.raises(ConfigurationError) as exc_info:
            read_hosts(basic_args)
        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_zero_hosts(self, basic_args):
        with pytest.raises(ConfigurationError) as exc_info:
            read_hosts(basic_args, stdin=io.StringIO("# nothing\n\n"))
        assert exc_info.value.code == ErrorCode.CONFIG_NO_HOSTS
