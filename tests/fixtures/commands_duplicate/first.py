from commands.command_spec import CommandSpec


async def run(ctx, args):
    return "first"


command = CommandSpec(name="first", description="first", category="Test", text_entry=run, aliases=("same",))
