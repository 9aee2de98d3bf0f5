from backport_reminder.cli import main

main()
