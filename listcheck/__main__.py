from listcheck.cli import main

main()
