from claw_relay.cli import main

main()
