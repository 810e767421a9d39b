from sitesmith.ui.cli import main


main()
