# Utils package for the campus marketplace backend
