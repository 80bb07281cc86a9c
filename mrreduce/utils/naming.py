"""File names shared by the map-side writer, the reduce task and the merger."""


def reduce_name(job_name, map_task, reduce_task):
    """Name of the intermediate file map task `map_task` wrote for `reduce_task`."""
    return f"mrtmp.{job_name}-{map_task}-{reduce_task}"


def merge_name(job_name, reduce_task):
    """Name of the output file of reduce task `reduce_task`."""
    return f"mrtmp.{job_name}-res-{reduce_task}"
