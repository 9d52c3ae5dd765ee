from i18nscope.cli import main

main()
