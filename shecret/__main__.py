from shecret.cli import main

main()
