from blitz_react.cli import main

main()
