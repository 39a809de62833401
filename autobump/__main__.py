from autobump.cli import cli

cli(prog_name="autobump")
