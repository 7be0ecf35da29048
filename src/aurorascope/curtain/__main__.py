from aurorascope.curtain.cli import main

main()
