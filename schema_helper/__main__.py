from schema_helper.main import main

raise SystemExit(main())
