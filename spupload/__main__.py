from spupload.cli.main import main

main()
