import asyncio
from unittest import mock

import jsonschema

from netemlib.config import config_context
from netemlib.errors import NetemExecutionError
from netemlib.netem.command import (
    NetemReset,
    NetemSet,
    Output,
    OutputError,
    OutputOk,
    execute,
    netem_from_dictionary,
    show,
)
from netemlib.netem.controls import Controls, Delay, Limit
from netemlib.netem.objects import Distribution
from netemlib.tests.unit import NetemTest


def _process(returncode, stdout=b"", stderr=b""):
    process = mock.Mock()
    process.returncode = returncode
    process.communicate = mock.AsyncMock(return_value=(stdout, stderr))
    return process


def _patch_exec(**kwargs):
    return mock.patch(
        "asyncio.create_subprocess_exec", new_callable=mock.AsyncMock, **kwargs
    )


class TestArgs(NetemTest):
    def test_set(self):
        netem = NetemSet("eth0", Controls(limit=Limit(0)))
        self.assertEqual(
            ["qdisc", "replace", "dev", "eth0", "root", "netem", "limit", "0"],
            netem.to_args(),
        )

    def test_set_full(self):
        netem = NetemSet(
            "eth1",
            Controls(
                limit=Limit(100),
                delay=Delay(100.0, 10.0, 25.0, Distribution.PARETONORMAL),
            ),
        )
        self.assertEqual(
            "qdisc replace dev eth1 root netem limit 100 "
            "delay 100ms 10ms 25.00% distribution paretonormal",
            " ".join(netem.to_args()),
        )

    def test_set_without_controls_is_not_a_reset(self):
        self.assertEqual(
            ["qdisc", "replace", "dev", "eth0", "root", "netem"],
            NetemSet("eth0").to_args(),
        )

    def test_reset(self):
        self.assertEqual(
            ["qdisc", "del", "dev", "eth0", "root", "netem"],
            NetemReset("eth0").to_args(),
        )


class TestFromDictionary(NetemTest):
    def test_set(self):
        netem = netem_from_dictionary(
            {
                "type": "set",
                "interface": "eth0",
                "controls": {
                    "limit": {"packets": 10},
                    "delay": {"time": 100, "distribution": "normal"},
                },
            }
        )
        self.assertEqual(
            NetemSet(
                "eth0",
                Controls(
                    limit=Limit(10),
                    delay=Delay(time=100, distribution=Distribution.NORMAL),
                ),
            ),
            netem,
        )

    def test_reset(self):
        netem = netem_from_dictionary({"type": "reset", "interface": "eth0"})
        self.assertEqual(NetemReset("eth0"), netem)

    def test_to_dict(self):
        d = {"type": "set", "interface": "eth0", "controls": {"limit": {"packets": 3}}}
        self.assertEqual(d, netem_from_dictionary(d).to_dict())
        d = {"type": "reset", "interface": "eth0"}
        self.assertEqual(d, netem_from_dictionary(d).to_dict())

    def test_unknown_type(self):
        with self.assertRaises(jsonschema.exceptions.ValidationError):
            netem_from_dictionary({"type": "loss", "interface": "eth0"})

    def test_missing_controls(self):
        with self.assertRaises(jsonschema.exceptions.ValidationError):
            netem_from_dictionary({"type": "set", "interface": "eth0"})

    def test_invalid_distribution(self):
        with self.assertRaises(jsonschema.exceptions.ValidationError):
            netem_from_dictionary(
                {
                    "type": "set",
                    "interface": "eth0",
                    "controls": {"delay": {"time": 1, "distribution": "Normal"}},
                }
            )


class TestExecute(NetemTest):
    def test_ok(self):
        with _patch_exec(return_value=_process(0)) as m:
            output = asyncio.run(execute(NetemReset("eth0")))
        self.assertEqual(OutputOk(), output)
        self.assertEqual({"status": "ok"}, output.to_dict())
        m.assert_called_once_with(
            "tc",
            "qdisc",
            "del",
            "dev",
            "eth0",
            "root",
            "netem",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

    def test_tc_binary_from_config(self):
        with config_context(tc_binary="/sbin/tc"), _patch_exec(
            return_value=_process(0)
        ) as m:
            asyncio.run(execute(NetemSet("eth0")))
        self.assertEqual("/sbin/tc", m.call_args[0][0])

    def test_exit_code(self):
        with _patch_exec(return_value=_process(2, stderr=b"bad")):
            output = asyncio.run(execute(NetemReset("eth0")))
        self.assertIsInstance(output, OutputError)
        self.assertIn("2", output.description)
        self.assertIn("bad", output.description)
        self.assertEqual(
            {
                "status": "error",
                "description": "Exit with status code: 2, stderr: bad",
            },
            output.to_dict(),
        )

    def test_exit_code_undecodable_stderr(self):
        with _patch_exec(return_value=_process(1, stderr=b"\xff\xfe")):
            output = asyncio.run(execute(NetemReset("eth0")))
        self.assertEqual(OutputError("Exit with status code: 1"), output)

    def test_killed_by_signal(self):
        with _patch_exec(return_value=_process(-9)):
            output = asyncio.run(execute(NetemReset("eth0")))
        self.assertEqual(OutputError("Process killed by signal"), output)

    def test_spawn_rejects_interface(self):
        with _patch_exec(side_effect=ValueError("embedded null byte")):
            output = asyncio.run(execute(NetemReset("eth\x000")))
        self.assertEqual(OutputError("Command Error: embedded null byte"), output)

    def test_output_is_abstract(self):
        with self.assertRaises(TypeError):
            Output()

    def test_launch_failure(self):
        with _patch_exec(side_effect=FileNotFoundError(2, "No such file", "tc")):
            output = asyncio.run(execute(NetemReset("eth0")))
        self.assertIsInstance(output, OutputError)
        self.assertTrue(output.description.startswith("Command Error"))


class TestShow(NetemTest):
    def test_show(self):
        stdout = (
            b"qdisc netem 8001: root refcnt 2 limit 1000 delay 100ms  10ms 25%\n"
        )
        with _patch_exec(return_value=_process(0, stdout=stdout)) as m:
            controls = asyncio.run(show("eth0"))
        self.assertEqual(
            Controls(
                limit=Limit(1000),
                delay=Delay(time=100.0, jitter=10.0, correlation=25.0),
            ),
            controls,
        )
        self.assertEqual(("tc", "qdisc", "show", "dev", "eth0"), m.call_args[0])

    def test_show_no_netem(self):
        stdout = b"qdisc fq_codel 0: root refcnt 2 limit 10240p flows 1024\n"
        with _patch_exec(return_value=_process(0, stdout=stdout)):
            controls = asyncio.run(show("eth0"))
        self.assertEqual(Controls(), controls)

    def test_show_fails(self):
        stderr = b'Cannot find device "eth9"\n'
        with _patch_exec(return_value=_process(1, stderr=stderr)):
            with self.assertRaises(NetemExecutionError):
                asyncio.run(show("eth9"))

    def test_show_spawn_rejects_interface(self):
        with _patch_exec(side_effect=ValueError("embedded null byte")):
            with self.assertRaises(NetemExecutionError) as ctx:
                asyncio.run(show("eth\x000"))
        self.assertEqual("Command Error: embedded null byte", ctx.exception.description)
